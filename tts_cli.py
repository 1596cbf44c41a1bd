#!/usr/bin/env python3
"""
Tiny CLI Text‑to‑Speech → WAV / MP3
  • One‑shot: --gender, --outfile, and either --string or --infile.
  • Optional --parse rule files rewrite the text before it is spoken.
  • MP3 output goes through a temporary WAV and the LAME encoder.
"""

import logging
import os
import sys
import tempfile

import lame
from speech_engine import Pyttsx3Engine
from text_prep import (
    InputFileNotFound,
    apply_rule_files,
    normalize_quotes,
    read_input_file,
)

log = logging.getLogger(__name__)

# ---------- Constants -------------------------------------------------------

FLAG_MARKER = "--"
GENDERS = ("Male", "Female")
USAGE = (
    "Usage: --gender <Male|Female> --outfile <OutputFile> "
    "(--string <Text> | --infile <InputFile>) [--parse <ParseFile> ...]"
)
RATE_ENV = "TTS_RATE"

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2


class InvalidArgument(ValueError):
    pass


# ---------- Helpers ---------------------------------------------------------

def setup_logging():
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "WARNING").upper(),
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def parse_arguments(tokens):
    """Map every `--flag` to the list of values that followed it, in order."""
    parsed = {}
    i = 0
    while i < len(tokens):
        token = tokens[i]
        if token.startswith(FLAG_MARKER):
            values = parsed.setdefault(token, [])
            if i + 1 < len(tokens) and not tokens[i + 1].startswith(FLAG_MARKER):
                values.append(tokens[i + 1])
                i += 1
        i += 1
    return parsed


def first(args, flag):
    values = args.get(flag) or []
    return values[0] if values else None


def split_extension(path):
    """Like os.path.splitext, but a bare `.mp3` name counts as an extension."""
    name = os.path.basename(path)
    dot = name.rfind(".")
    if dot < 0:
        return path, ""
    cut = len(path) - len(name) + dot
    return path[:cut], path[cut:]


def resolve_output(outfile):
    """Return (path, kind); unknown extensions become `<outfile>.wav`."""
    extension = split_extension(outfile)[1].lower()
    if extension == ".mp3":
        return outfile, "mp3"
    if extension == ".wav":
        return outfile, "wav"
    return outfile + ".wav", "wav"


def check_sources(args):
    if "--string" in args and "--infile" in args:
        raise InvalidArgument(
            "Error: Both --string and --infile cannot be used together. Please specify only one."
        )
    if "--string" not in args and "--infile" not in args:
        raise InvalidArgument("Error: You must specify either --string or --infile.")


def speech_rate():
    """Words per minute from $TTS_RATE, or None for the engine neutral rate."""
    value = os.getenv(RATE_ENV)
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        raise InvalidArgument(f"Error: {RATE_ENV} must be a whole number, got '{value}'.") from None


def check_gender(gender):
    if gender not in GENDERS:
        raise InvalidArgument("Error: Invalid gender specified. Use 'Male' or 'Female'.")


def build_utterance(args):
    if "--string" in args:
        text = first(args, "--string")
    else:
        text = read_input_file(first(args, "--infile"))
    text = apply_rule_files(text, args.get("--parse", []))
    return normalize_quotes(text)


def ensure_parent_dir(path):
    out_dir = os.path.dirname(path)
    if out_dir and not os.path.isdir(out_dir):
        os.makedirs(out_dir, exist_ok=True)


def synthesize(text, gender, outfile, kind, engine_factory=Pyttsx3Engine, rate=None):
    """Render text to outfile (wav) or via a temporary WAV to MP3; return the absolute path."""
    tmp_wav = None
    try:
        if kind == "mp3":
            with tempfile.NamedTemporaryFile(suffix=".wav", delete=False) as tmp:
                tmp_wav = tmp.name
        wav_path = tmp_wav or outfile

        engine = engine_factory()
        engine.set_rate(rate)
        engine.select_voice(gender)
        engine.render_to_file(text, wav_path)

        if kind != "mp3":
            return os.path.abspath(outfile)

        lame_path = lame.find_lame()
        mp3_path = split_extension(outfile)[0] + ".mp3"
        lame.convert_to_mp3(lame_path, wav_path, mp3_path)
        return os.path.abspath(mp3_path)
    finally:
        if tmp_wav and os.path.exists(tmp_wav):
            os.remove(tmp_wav)
            log.debug("Removed temporary WAV %s", tmp_wav)


# ---------- Main ------------------------------------------------------------

def run(args, engine_factory=Pyttsx3Engine):
    """Validate parsed arguments, convert, and return the process exit code."""
    gender = first(args, "--gender")
    outfile = first(args, "--outfile")
    if gender is None or outfile is None:
        print(USAGE)
        return EXIT_USAGE

    try:
        rate = speech_rate()
        check_sources(args)
        if first(args, "--string") is None and first(args, "--infile") is None:
            print(USAGE)
            return EXIT_USAGE

        outfile, kind = resolve_output(outfile)
        text = build_utterance(args)
        check_gender(gender)
        ensure_parent_dir(outfile)

        saved = synthesize(text, gender, outfile, kind, engine_factory, rate)
    except InvalidArgument as e:
        print(e)
        return EXIT_USAGE
    except InputFileNotFound as e:
        print(f"Error: {e}")
        return EXIT_FAILURE
    except lame.EncoderNotFound:
        print("Error: LAME encoder not found. Cannot create MP3 file.")
        return EXIT_FAILURE
    except lame.EncoderError as e:
        print("Error: LAME encoder failed.")
        print(e.stderr.rstrip())
        return EXIT_FAILURE

    print(f"{kind.upper()} file saved to: {saved}")
    return EXIT_OK


def main(argv=None, engine_factory=Pyttsx3Engine):
    setup_logging()
    args = parse_arguments(sys.argv[1:] if argv is None else argv)
    log.debug("Parsed arguments: %s", args)
    return run(args, engine_factory)


if __name__ == "__main__":
    sys.exit(main())
