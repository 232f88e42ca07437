"""Pure helpers shared by both completion paths."""

from .messages import normalize_block, normalize_messages, normalize_prompt, to_message_list

__all__ = ["normalize_block", "normalize_messages", "normalize_prompt", "to_message_list"]
