"""
Voxnote console front end.

Run with: ``python -m src.ui.app record`` (press Enter to stop) or
``python -m src.ui.app transcribe meeting.m4a``.

Navigation to a saved transcription prints the stored record.
"""

import argparse
import asyncio
import logging
import sys

from src.core.config import get_settings
from src.core.exceptions import UnsupportedAudioTypeError
from src.services.audio import AudioCaptureController
from src.services.audio.microphone import MicrophoneInput
from src.ui.api_client import APIClient, APIError
from src.ui.components.recorder import RecorderFlow

logger = logging.getLogger(__name__)


def _print_transcription(record: dict) -> None:
    print(f"\n{record['title']}  ({record['id']})")
    print("-" * min(len(record["title"]), 80))
    print(record["fullTranscription"])


async def _run(args: argparse.Namespace) -> int:
    saved: list[str] = []
    failures: list[str] = []

    async with APIClient() as client:
        if args.command == "show":
            _print_transcription(await client.get_transcription(args.id))
            return 0
        if args.command == "summarize":
            summary = await client.summarize(args.id)
            print(summary["summary"])
            if summary["keywords"]:
                print("Keywords:", ", ".join(summary["keywords"]))
            return 0

        with AudioCaptureController(MicrophoneInput()) as controller:
            flow = RecorderFlow(
                controller,
                client,
                navigate=saved.append,
                notify=failures.append,
                language=args.language,
            )
            if args.command == "record":
                await flow.on_start()
                if failures:
                    print(failures[-1], file=sys.stderr)
                    return 1
                await asyncio.to_thread(input, "Recording... press Enter to stop. ")
                await flow.on_stop()
            else:
                try:
                    await flow.on_drop(args.files)
                except UnsupportedAudioTypeError as exc:
                    print(exc.detail, file=sys.stderr)
                    return 2

        if not saved:
            print(failures[-1] if failures else "Nothing recorded.", file=sys.stderr)
            return 1
        _print_transcription(await client.get_transcription(saved[-1]))
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description="Record or upload audio and transcribe it")
    parser.add_argument("--language", help="ISO 639-1 language hint (server default when omitted)")
    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("record", help="Record from the default microphone")
    transcribe = sub.add_parser("transcribe", help="Transcribe an .mp3, .wav or .m4a file")
    transcribe.add_argument("files", nargs="+")
    show = sub.add_parser("show", help="Print a saved transcription")
    show.add_argument("id")
    summarize = sub.add_parser("summarize", help="Summarize a saved transcription")
    summarize.add_argument("id")
    args = parser.parse_args()

    logging.basicConfig(level=get_settings().log_level.upper())
    try:
        return asyncio.run(_run(args))
    except APIError as exc:
        print(f"Error ({exc.category}): {exc.message}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())
