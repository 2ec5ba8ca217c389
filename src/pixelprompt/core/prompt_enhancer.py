"""Prompt enhancement for the hosted image model.

The final prompt sent to the remote model is assembled from three inputs:

1. The user's prompt, trimmed.
2. Optional style and quality modifiers, each appended as ``", <phrase>"``
   in that fixed order (style before quality).
3. An optional system prompt, prepended with a ``User request:`` marker.

Structure with a system prompt::

    [System Prompt]

    User request: [Prompt], [Style Modifier], [Quality Modifier]

Unknown style or quality keys are ignored rather than rejected, so the
frontend can offer new options before the modifier tables know about them.

Usage
-----
::

    final = enhance(
        "Sunset over mountains",
        GenerationParameters(style="cinematic"),
        None,
    )
"""

from __future__ import annotations

from pixelprompt.core.exceptions import EmptyPromptError
from pixelprompt.core.models import GenerationParameters

# ---------------------------------------------------------------------------
# Fixed modifier tables.
# The phrases must stay byte-for-byte stable: persisted history stores the
# enhanced prompt, and users compare new results against old ones.
# ---------------------------------------------------------------------------

STYLE_MODIFIERS: dict[str, str] = {
    "realistic": "photorealistic, high detail, professional photography",
    "artistic": "artistic style, creative interpretation, expressive",
    "abstract": "abstract art, conceptual, modern artistic style",
    "cinematic": "cinematic lighting, movie-like quality, dramatic composition",
    "minimalist": "clean, simple, minimalist design, elegant composition",
}

QUALITY_MODIFIERS: dict[str, str] = {
    "standard": "good quality",
    "high": "high quality, detailed, sharp",
    "ultra": "ultra high quality, 8k, masterpiece, highly detailed",
}

SYSTEM_PROMPT_SEPARATOR = "\n\nUser request: "


def apply_modifiers(prompt: str, parameters: GenerationParameters | None = None) -> str:
    """Append the style and quality modifiers to a prompt.

    Args:
        prompt: Raw user prompt.  Surrounding whitespace is removed.
        parameters: Selected style/quality.  ``None`` or unknown keys add
            nothing.

    Returns:
        The enhanced prompt.
    """
    enhanced = prompt.strip()
    if parameters is None:
        return enhanced

    style_phrase = STYLE_MODIFIERS.get(parameters.style or "")
    if style_phrase:
        enhanced += f", {style_phrase}"

    quality_phrase = QUALITY_MODIFIERS.get(parameters.quality or "")
    if quality_phrase:
        enhanced += f", {quality_phrase}"

    return enhanced


def apply_system_prompt(enhanced_prompt: str, system_prompt: str | None = None) -> str:
    """Prefix the enhanced prompt with the system prompt, if there is one.

    A system prompt that is blank after trimming is treated as absent.
    """
    if system_prompt and system_prompt.strip():
        return f"{system_prompt}{SYSTEM_PROMPT_SEPARATOR}{enhanced_prompt}"
    return enhanced_prompt


def enhance(
    prompt: str,
    parameters: GenerationParameters | None = None,
    system_prompt: str | None = None,
) -> str:
    """Build the final prompt string sent to the remote model.

    Args:
        prompt: User prompt.  Must be non-empty after trimming.
        parameters: Style/quality selection.
        system_prompt: Optional instructions prepended to the request.

    Returns:
        The final prompt.

    Raises:
        EmptyPromptError: If ``prompt`` is blank.
    """
    if not prompt or not prompt.strip():
        raise EmptyPromptError()
    return apply_system_prompt(apply_modifiers(prompt, parameters), system_prompt)
