# config/engine_config.py

ENGINE_CONFIG = {
    "text_generation": {
        "model": {
            "name": "llama-3.3-70b-versatile",
            "temperature": 0.7,
            "max_tokens": 2048,
        },
        # Seconds before a single model call is abandoned and reported as a failure
        "timeout": 60,
    },
    "enrichment": {
        # Used when the user has no template (or an empty one) for a stage
        "fallback_instructions": {
            "categorization": "Categorize this email",
            "action_extraction": "Extract action items",
            "auto_reply": "Draft a reply",
        },
    },
    "chat": {
        "max_tokens": 1000,
        "system_instruction": (
            "You are an intelligent email assistant. {summary}. Help the user manage "
            "their inbox, answer questions about emails, and provide insights."
        ),
        "uncategorized_label": "Uncategorized",
    },
}
