# Shared helpers. Runs before every hook in the same namespace, so hooks can
# call these directly. Host bindings (text, state, info, history, story_cards,
# add_story_card, remove_story_card, update_story_card, log) are available here
# too.


def squash_whitespace(value):
    return " ".join(value.split())


def matching_cards(source):
    lowered = source.lower()
    return [
        card
        for card in story_cards
        if any(key.lower() in lowered for key in card.keys)
    ]


def trim_to_max_chars(value):
    if info.max_chars and len(value) > info.max_chars:
        return value[-info.max_chars:]
    return value
