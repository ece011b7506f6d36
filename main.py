import argparse
import asyncio
import getpass
import logging
import sys

import pyperclip

from alt_text_generator import AltTextGenerator
from config import API_SETTINGS, CREDENTIAL_SETTINGS, MODELS
from credential_store import EnvFileCredentialStore
from errors import AltTextError, user_message
from preferences import Preferences
from prompts import DetailLevel, FocusLevel, GenerationConfig

KEY_NAME = CREDENTIAL_SETTINGS["key_name"]


def on_off(value):
    value = value.lower()
    if value in ('on', 'true', 'yes', '1'):
        return True
    if value in ('off', 'false', 'no', '0'):
        return False
    raise argparse.ArgumentTypeError(f"expected 'on' or 'off', got '{value}'")


def confirm(question):
    answer = input(f"{question} [Y/n] ").strip().lower()
    return answer in ('', 'y', 'yes')


def copy_to_clipboard(text):
    try:
        pyperclip.copy(text)
    except pyperclip.PyperclipException as e:
        print(f"⚠️ Could not copy to clipboard: {e}")
        return
    print("📋 Copied to clipboard!")


def run_generate(args, store, preferences):
    config = GenerationConfig(
        detail_level=DetailLevel(args.detail),
        focus_level=FocusLevel(args.focus.replace('-', ' ')),
    )

    if not preferences.get("auto_generate"):
        try:
            confirmed = confirm(f"🖼️ Send {len(args.images)} image(s) to OpenAI?")
        except EOFError:
            print("❌ No answer on stdin. Run 'alt-text settings --auto-generate on' to skip the question.")
            return 1
        if not confirmed:
            print("❌ Cancelled")
            return 1

    print(f"\n🤖 Generating alt text for {len(args.images)} image(s)...")
    generator = AltTextGenerator(
        credential_store=store,
        model=args.model,
        timeout=args.timeout,
    )
    try:
        alt_text = asyncio.run(generator.generate(args.images, config))
    except AltTextError as e:
        print(f"❌ {user_message(e)}")
        return 1

    print("\nGenerated Alt Text:\n")
    print(alt_text)

    if args.copy or preferences.get("auto_copy"):
        copy_to_clipboard(alt_text)
    return 0


def run_set_key(args, store, preferences):
    api_key = args.key if args.key is not None else getpass.getpass("🔑 Enter your OpenAI API key: ")
    if not api_key.strip():
        print("❌ Please enter an API key before saving")
        return 1
    if not store.set(KEY_NAME, api_key):
        print("❌ Failed to save API Key to secure storage")
        return 1
    print("✅ API Key saved successfully! You can now generate alt text.")
    return 0


def run_clear_key(args, store, preferences):
    if store.delete(KEY_NAME):
        print("✅ API Key removed successfully")
        return 0
    print("❌ Failed to remove API Key")
    return 1


def run_settings(args, store, preferences):
    try:
        if args.auto_copy is not None:
            preferences.set("auto_copy", args.auto_copy)
        if args.auto_generate is not None:
            preferences.set("auto_generate", args.auto_generate)
    except OSError as e:
        print(f"❌ Failed to save preferences to {preferences.path}: {e}")
        return 1

    has_key = store.get(KEY_NAME) is not None
    print(f"🔑 API key: {'stored' if has_key else 'not set'}")
    for name, value in preferences.as_dict().items():
        print(f"⚙️ {name}: {'on' if value else 'off'}")
    return 0


def build_parser():
    parser = argparse.ArgumentParser(prog="alt-text", description="Generate accessibility alt text for images using AI")
    parser.add_argument('-v', '--verbose', action='store_true', help="Show debug logging")
    parser.add_argument('--env-file', default=CREDENTIAL_SETTINGS["env_file"], help="File holding the API key")
    parser.add_argument('--preferences', default=None, help="Preferences file")
    subparsers = parser.add_subparsers(dest='command', required=True)

    generate = subparsers.add_parser('generate', help="Generate alt text for one or more images")
    generate.add_argument('images', nargs='+', help="Image files")
    generate.add_argument('--detail', choices=[level.value for level in DetailLevel], default=DetailLevel.NORMALLY.value)
    generate.add_argument('--focus', choices=[level.value.replace(' ', '-') for level in FocusLevel], default='whole-screen')
    generate.add_argument('--model', default=MODELS["alt_text"])
    generate.add_argument('--timeout', type=float, default=API_SETTINGS["timeout"], help="Seconds per request")
    generate.add_argument('--copy', action='store_true', help="Copy the result to the clipboard")
    generate.set_defaults(handler=run_generate)

    set_key = subparsers.add_parser('set-key', help="Save your OpenAI API key")
    set_key.add_argument('key', nargs='?', help="API key (prompted for when omitted)")
    set_key.set_defaults(handler=run_set_key)

    clear_key = subparsers.add_parser('clear-key', help="Remove the stored API key")
    clear_key.set_defaults(handler=run_clear_key)

    settings = subparsers.add_parser('settings', help="Show or change preferences")
    settings.add_argument('--auto-copy', type=on_off, metavar='on|off')
    settings.add_argument('--auto-generate', type=on_off, metavar='on|off')
    settings.set_defaults(handler=run_settings)

    return parser


def main(argv=None):
    """Main entry point for the application."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    store = EnvFileCredentialStore(args.env_file)
    preferences = Preferences(args.preferences) if args.preferences else Preferences()
    return args.handler(args, store, preferences)


if __name__ == "__main__":
    sys.exit(main())
