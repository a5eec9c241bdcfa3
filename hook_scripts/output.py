# Output hook: trims stray whitespace from AI text.


def modifier(text):
    return text.strip()


modifier(text);
