"""
Prompt construction for the two upstream stages.

The vision prompt asks the vision model for a single JSON object describing the
screenshot; the reasoning prompt hands that JSON (verbatim) plus the user's
question to the target model. Pure string building, no I/O.
"""

from typing import Any

VISION_PROMPT_TEMPLATE = """**Task:** You are an image analysis assistant. Describe the screenshot below in detail so that another AI model, which cannot see the image, understands its visual content and context. Output strictly in the required JSON format.

**Context:**
{os_line}- Background: the user captured this screenshot while running a desktop application; it shows the interface or problem they ran into.
- The user's original question is: "{user_text}"

**Instructions:**
1. Analyze the whole screenshot, but focus on the windows, regions and UI elements most relevant to the user's question "{user_text}".
2. Output one JSON object with the following keys (values must be valid JSON types: strings, arrays, objects, booleans, null):
    - `main_window`: (String | null) Title of the main window, if identifiable.
    - `relevant_elements`: (Array of Objects) UI elements relevant to the question. Each object contains:
        - `type`: (String) Element type (e.g. "button", "input", "menu", "text_block", "error_message").
        - `label`: (String | null) Text label or icon description of the element.
        - `value`: (String | boolean | number | null) State or content of the element (e.g. input text, checkbox state).
        - `ocr_text`: (String | null) OCR text associated with the element.
    - `ocr_full_text`: (String | null) All text extracted from the screenshot.
    - `visual_state_notes`: (Array of Strings) Notable visual states (e.g. "Element X is highlighted", "Button Y is disabled").
    - `pointer_location`: (String | null) Where the mouse pointer is, if visible and relevant.
3. Stay objective: describe only what is visible. Output exactly one valid JSON object, with no explanatory text and no ```json ``` markers."""

REASONING_PROMPT_TEMPLATE = """The user ran into a problem{os_suffix}.
The user's question is: "{user_text}"

The user provided a screenshot. Here is a JSON description of its content:
--- JSON START ---
{description_json}
--- JSON END ---

Based on the user's question and the JSON description of the screenshot above, analyze the likely causes of the problem and give detailed, actionable solutions or steps. Answer the user's original question directly, reasoning with the visual context provided."""


def build_vision_prompt(
    user_text: str, image_data_url: str, host_os: str | None = None
) -> tuple[str, dict[str, Any]]:
    """Return (instruction text, image_url content part) for the vision call."""
    os_line = f"- Operating system: {host_os}\n" if host_os else ""
    prompt = VISION_PROMPT_TEMPLATE.format(os_line=os_line, user_text=user_text)
    image_part = {"type": "image_url", "image_url": {"url": image_data_url}}
    return prompt, image_part


def build_reasoning_prompt(user_text: str, description_json: str, host_os: str | None = None) -> str:
    """Embed the question and the validated description JSON string as-is."""
    os_suffix = f" while using '{host_os}'" if host_os else ""
    return REASONING_PROMPT_TEMPLATE.format(
        os_suffix=os_suffix,
        user_text=user_text,
        description_json=description_json,
    )
