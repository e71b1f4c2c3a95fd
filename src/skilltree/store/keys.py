import hashlib
import re

_UNSAFE = re.compile(r"[^a-z0-9-]")
SUBSTITUTE = "_"

# Leaves room for the ".json" suffix under the usual 255-byte NAME_MAX.
MAX_KEY_LENGTH = 200
_DIGEST_LENGTH = 12


def normalize_topic(topic: str) -> str:
    """Map a topic to its cache key.

    The topic is lowercased and every character outside ``[a-z0-9-]`` is
    replaced by a single underscore, so the result is safe to use as a file
    name. Distinct topics may share a key: "Set Theory" and "set_theory" both
    become ``set_theory``.

    Keys longer than ``MAX_KEY_LENGTH`` are cut short and end with a digest of
    the full key, so they stay distinct and the result is still a fixed point.

    Raises:
        ValueError: If the topic is empty or only whitespace.
    """
    if not topic or not topic.strip():
        raise ValueError("Topic must be a non-empty string")
    key = _UNSAFE.sub(SUBSTITUTE, topic.lower())
    if len(key) <= MAX_KEY_LENGTH:
        return key
    digest = hashlib.sha256(key.encode("utf-8")).hexdigest()[:_DIGEST_LENGTH]
    return f"{key[: MAX_KEY_LENGTH - _DIGEST_LENGTH - 1]}{SUBSTITUTE}{digest}"
