"""System prompt presets and prompt suggestions offered by the frontend."""

from __future__ import annotations

SYSTEM_PROMPT_PRESETS: dict[str, str] = {
    "default": (
        "Create a high-quality, detailed image based on the user's description. "
        "Focus on clarity, composition, and visual appeal."
    ),
    "realistic": (
        "Generate a photorealistic image with high attention to detail, natural lighting, "
        "and realistic textures. Ensure the composition is well-balanced and visually appealing."
    ),
    "artistic": (
        "Create an artistic interpretation with creative flair, expressive colors, and unique "
        "composition. Emphasize artistic style and creative expression over photorealism."
    ),
    "professional": (
        "Generate a professional-quality image suitable for commercial use. Focus on clean "
        "composition, appropriate lighting, and polished presentation."
    ),
    "creative": (
        "Push creative boundaries with unique perspectives, innovative compositions, and "
        "imaginative elements. Prioritize originality and visual impact."
    ),
    "minimal": (
        "Create a clean, minimalist image with simple composition, elegant use of negative "
        "space, and focus on essential elements only."
    ),
    "cinematic": (
        "Generate a cinematic-quality image with dramatic lighting, compelling composition, "
        "and movie-like visual storytelling elements."
    ),
    "vibrant": (
        "Create an image with vibrant colors, high contrast, and energetic visual elements. "
        "Emphasize boldness and visual impact."
    ),
}

CUSTOM_PRESET = "custom"
DEFAULT_SYSTEM_PROMPT = SYSTEM_PROMPT_PRESETS["default"]

PROMPT_SUGGESTIONS: list[str] = [
    "A serene mountain landscape at sunset with golden light",
    "A futuristic city skyline with flying cars and neon lights",
    "A magical forest with glowing mushrooms and fairy lights",
    "A cozy coffee shop interior with warm lighting and books",
    "An abstract geometric pattern in vibrant colors",
    "A portrait of a wise old wizard with a long beard",
    "A steampunk mechanical dragon breathing golden steam",
    "A peaceful zen garden with cherry blossoms",
]


def detect_preset(system_prompt: str | None) -> str:
    """Return the preset key whose text equals ``system_prompt``, else ``"custom"``."""
    for key, value in SYSTEM_PROMPT_PRESETS.items():
        if value == system_prompt:
            return key
    return CUSTOM_PRESET
