"""
Complete Story Weaver configuration schema definition.
Centralizes all configuration options with their metadata.
"""

from .core import ConfigField, ConfigSection, FieldType

SECTION_NAMES = ["story", "images", "audio", "output", "system"]

SUPPORTED_LANGUAGES = [
    "English",
    "French",
    "German",
    "Japanese",
    "Spanish",
    # Indian languages
    "Assamese",
    "Bengali",
    "Gujarati",
    "Hindi",
    "Kannada",
    "Malayalam",
    "Marathi",
    "Odia",
    "Punjabi",
    "Tamil",
    "Telugu",
    "Urdu",
]


def _create_story_section() -> ConfigSection:
    """Create the story configuration section."""
    section = ConfigSection(name="story", description="Story generation parameters")

    section.add_field(
        ConfigField(
            name="language",
            field_type=FieldType.STRING,
            default="English",
            section="story",
            description="Language the story is written in",
            cli_help="Story language (English, French, German, Japanese, Spanish, Hindi, ...)",
            cli_short="-L",
            valid_values=SUPPORTED_LANGUAGES,
            example_values=["English", "French"],
            ini_comment="Story language options: " + ", ".join(SUPPORTED_LANGUAGES),
        )
    )

    section.add_field(
        ConfigField(
            name="max_length",
            field_type=FieldType.INTEGER,
            default=250,
            section="story",
            description="Maximum length of the generated story in words",
            cli_help="Maximum story length in words (50-500)",
            cli_short="-l",
            min_value=50,
            max_value=500,
            example_values=["120", "250"],
        )
    )

    section.add_field(
        ConfigField(
            name="temperature",
            field_type=FieldType.FLOAT,
            default=0.8,
            section="story",
            description="Randomness of the story (0.0 predictable, 1.0 maximum randomness)",
            cli_help="Randomness / sampling temperature (0.0-1.0)",
            cli_short="-t",
            min_value=0.0,
            max_value=1.0,
            example_values=["0.2", "0.8"],
        )
    )

    return section


def _create_images_section() -> ConfigSection:
    """Create the images configuration section."""
    section = ConfigSection(name="images", description="Illustration parameters")

    section.add_field(
        ConfigField(
            name="generate_images",
            field_type=FieldType.BOOLEAN,
            default=True,
            section="images",
            description="Illustrate every newly generated story",
            cli_help="Illustrate the story after it is generated",
            ini_comment="Illustrate new stories by default: true, false",
        )
    )

    section.add_field(
        ConfigField(
            name="image_model",
            field_type=FieldType.STRING,
            default="",
            section="images",
            description="Gemini model used for illustrations",
            cli_help="Image model (leave empty for auto-discovery)",
            example_values=["gemini-2.5-flash-image"],
            ini_comment="Image generation model (leave empty for auto-discovery)",
        )
    )

    return section


def _create_audio_section() -> ConfigSection:
    """Create the narration configuration section."""
    section = ConfigSection(name="audio", description="Narration parameters")

    section.add_field(
        ConfigField(
            name="voice",
            field_type=FieldType.STRING,
            default="Algenib",
            section="audio",
            description="Prebuilt voice used for narration",
            cli_help="Narration voice name",
            example_values=["Algenib", "Kore"],
        )
    )

    section.add_field(
        ConfigField(
            name="tts_model",
            field_type=FieldType.STRING,
            default="gemini-2.5-flash-preview-tts",
            section="audio",
            description="Gemini text-to-speech model",
            cli_help="Text-to-speech model",
            example_values=["gemini-2.5-flash-preview-tts"],
        )
    )

    return section


def _create_output_section() -> ConfigSection:
    """Create the output configuration section."""
    section = ConfigSection(name="output", description="Output and file handling options")

    section.add_field(
        ConfigField(
            name="output_dir",
            field_type=FieldType.PATH,
            default="",
            section="output",
            description="Directory where illustrations, narrations and PDFs are saved",
            cli_help="Directory to save the output (default: auto-generated)",
            cli_short="-o",
            example_values=["./my_stories"],
            ini_comment="Default output directory (leave empty for auto-generated timestamp)",
        )
    )

    return section


def _create_system_section() -> ConfigSection:
    """Create the system configuration section."""
    section = ConfigSection(name="system", description="System-level configuration options")

    section.add_field(
        ConfigField(
            name="text_model",
            field_type=FieldType.STRING,
            default="",
            section="system",
            description="Gemini model used for story text",
            cli_help="Text model (leave empty for auto-discovery)",
            example_values=["gemini-2.5-flash"],
            ini_comment="Text generation model (leave empty for auto-discovery)",
        )
    )

    section.add_field(
        ConfigField(
            name="verbose",
            field_type=FieldType.BOOLEAN,
            default=False,
            section="system",
            description="Enable detailed logging output",
            cli_help="Enable verbose output",
            cli_short="-v",
            ini_comment="Enable verbose output by default: true, false",
        )
    )

    section.add_field(
        ConfigField(
            name="debug",
            field_type=FieldType.BOOLEAN,
            default=False,
            section="system",
            description="Use the offline debug backend instead of Gemini",
            cli_help="Enable debug mode (offline backend, no API calls)",
            ini_comment="Enable debug mode by default: true, false",
        )
    )

    return section


# Global schema instance
STORYWEAVER_SCHEMA = type(
    "StoryWeaverSchema",
    (),
    {
        "story": _create_story_section(),
        "images": _create_images_section(),
        "audio": _create_audio_section(),
        "output": _create_output_section(),
        "system": _create_system_section(),
    },
)()
