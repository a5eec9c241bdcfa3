# Input hook: tidies player text. "remember <key>: <fact>" files a story card
# and is kept in the history as written.


def modifier(text):
    cleaned = squash_whitespace(text)
    if cleaned.lower().startswith("remember ") and ":" in cleaned:
        key, _, fact = cleaned[len("remember "):].partition(":")
        if add_story_card([key.strip()], fact.strip()) is False:
            log("story card already exists:", key.strip())
    return {"text": cleaned}


modifier(text)
