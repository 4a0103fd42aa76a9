import re

MARKDOWN_IMAGE = re.compile(r'!\[[^\]]*\]\(\s*<?([^)\s>]+)>?(?:\s+"[^"]*")?\s*\)')
HTML_IMAGE = re.compile(r'<img[^>]+src=["\']([^"\']+)["\']', re.IGNORECASE)


def extract_image(content):
    """Return the URL of the first image in Markdown content, or None."""
    if not content:
        return None
    candidates = []
    for pattern in (MARKDOWN_IMAGE, HTML_IMAGE):
        match = pattern.search(content)
        if match:
            candidates.append((match.start(), match.group(1)))
    if not candidates:
        return None
    return min(candidates)[1]
