"""
Configuration settings for the Alt Text Generator application.
Contains model settings, API configuration, prompt text and storage locations.
"""

# OpenAI Model Settings
MODELS = {
    "alt_text": "gpt-4o",  # Vision model used to describe images
}

# API Settings
API_SETTINGS = {
    "base_url": "https://api.openai.com/v1",
    "timeout": 60.0,  # Seconds per request; large images can take a while
}

# Image Processing Settings
IMAGE_SETTINGS = {
    "max_size": (2048, 2048),  # Maximum dimensions sent to the API
    "quality": 80,             # JPEG compression quality (1-100)
}

# Detail levels: base instruction and response token budget
DETAIL_PROMPTS = {
    "quickly": {
        "prompt": "Generate a brief alt text for this image. Provide a concise description focusing only on the main subject. Maximum 1-2 sentences.",
        "max_tokens": 75,
    },
    "normally": {
        "prompt": "Generate a concise and descriptive alt text for this image. The alt text should be suitable for accessibility purposes and describe the main content of the image in a clear, informative way.",
        "max_tokens": 150,
    },
    "fully": {
        "prompt": "Generate a detailed and comprehensive alt text for this image. Include all important elements, their relationships, colors, emotions, and context. Provide a thorough description suitable for someone who cannot see the image.",
        "max_tokens": 300,
    },
}

# Focus levels: clause appended to the detail instruction
FOCUS_INSTRUCTIONS = {
    "whole screen": "Describe the entire image, including background elements, overall composition, and spatial relationships.",
    "large images": "Focus primarily on the most prominent, large, or important visual elements. Give less attention to small details or background elements.",
}

# Credential Storage
CREDENTIAL_SETTINGS = {
    "env_file": ".env",
    "key_name": "OPENAI_API_KEY",
}

# User Preferences
PREFERENCE_SETTINGS = {
    "file": "preferences.json",
    "defaults": {
        "auto_copy": False,      # Copy generated alt text to the clipboard
        "auto_generate": False,  # Upload without asking for confirmation
    },
}

# Shown when no API key has been stored yet
API_KEY_HELP = """No API key found. Please:

1. Run 'alt-text set-key' to open the key prompt
2. Get an API key from platform.openai.com
3. Enter your API key and press Enter
4. Make sure you have credits in your OpenAI account"""
