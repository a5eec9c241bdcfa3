# Context hook: prepends triggered story cards and the author's note, then
# trims the result to info.max_chars.


def modifier(text):
    lines = [f"[{', '.join(card.keys)}] {card.entry}" for card in matching_cards(text)]
    if state.memory.authors_note:
        lines.append(f"[Author's note: {state.memory.authors_note}]")
    lines.append(text)
    return {"text": trim_to_max_chars("\n".join(lines))}


modifier(text)
