from __future__ import annotations

from pathlib import Path

_TIKTOKEN_ENCODER = None


def _get_tiktoken_encoder():
    """Get cached tiktoken encoder to avoid repeated initialization."""
    global _TIKTOKEN_ENCODER
    if _TIKTOKEN_ENCODER is None:
        try:
            import tiktoken
            _TIKTOKEN_ENCODER = tiktoken.get_encoding("cl100k_base")
        except Exception:
            pass
    return _TIKTOKEN_ENCODER


def estimate_tokens(text: str) -> int:
    if not text:
        return 0
    encoder = _get_tiktoken_encoder()
    if encoder is not None:
        return len(encoder.encode(text))
    return max(1, len(text) // 4)


def extraction_summary(output: str | Path | None, declarations: int, text: str) -> str:
    """One-line report printed after an extraction."""
    target = f"'{output}'" if output else "stdout"
    plural = "" if declarations == 1 else "s"
    return (
        f"Extraction completed. Code written to {target} "
        f"({declarations} declaration{plural}, ~{estimate_tokens(text)} tokens)."
    )
