"""Main application entry point for wavscribe."""

import sys
import asyncio
import argparse
import logging
from pathlib import Path
from typing import Optional

from google.auth.exceptions import GoogleAuthError

from wavscribe.audio.source import AudioSource
from wavscribe.audio.wav import read_wav_header
from wavscribe.errors import WavScribeError
from wavscribe.segmentation.driver import DriverStats, StreamDriver
from wavscribe.transcription import (
    GoogleSpeechBackend,
    TranscriptionDispatcher,
    TranscriptionPublisher,
    TranscriptPrinter,
)

from .config import WavScribeConfig

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT_SECONDS = 60.0


class Server:

    def __init__(self, config: WavScribeConfig, filename: Optional[str] = None):
        self.config = config
        self.filename = filename
        self.settings = config.get_segmenter_settings()
        self.source: Optional[AudioSource] = None
        self.backend: Optional[GoogleSpeechBackend] = None
        self.printer: Optional[TranscriptPrinter] = None

    def init(self):
        logger.info("Initializing services...")
        credentials_path = self.config.get_google_credentials_path()

        self.source = AudioSource.open(self.filename)
        self.audio_format = read_wav_header(self.source.stream)
        logger.info(f"Transcription language: {self.settings.language_code}")

        self.backend = GoogleSpeechBackend(
            credentials_path=credentials_path,
            sample_rate=self.audio_format.sample_rate,
            language=self.settings.language_code,
            encoding=self.audio_format.encoding,
            # a blocked recognize call must not outlive the shutdown grace period
            request_timeout=min(REQUEST_TIMEOUT_SECONDS, self.settings.shutdown_grace_seconds),
        )
        if not self.backend.initialize():
            raise RuntimeError("Google Speech backend failed to initialize")

        self.printer = TranscriptPrinter(ordered=self.settings.ordered_output)
        self.dispatcher = TranscriptionDispatcher(
            backend=self.backend,
            publisher=TranscriptionPublisher(),
            max_concurrent_requests=self.settings.max_concurrent_requests,
        )
        self.driver = StreamDriver(
            source=self.source,
            audio_format=self.audio_format,
            settings=self.settings,
            dispatcher=self.dispatcher,
        )

    def run(self) -> DriverStats:
        try:
            return asyncio.run(self.driver.run())
        finally:
            self.cleanup()

    def cleanup(self):
        if self.source is not None:
            self.source.close()
        if self.printer is not None:
            self.printer.shutdown()
            self.printer = None
        if self.backend is not None:
            try:
                self.backend.cleanup()
            except Exception as e:
                logger.warning(f"Error cleaning up backend: {e}")
            self.backend = None


def setup_logging(config: WavScribeConfig, level: str = "INFO", debug: bool = False) -> None:
    """Set up logging configuration from YAML config.

    Console logging goes to stderr; stdout carries the transcripts.
    """
    log_file_path = config.get('logging.file_path')
    console_output = config.get('logging.console_output', True)

    handlers = []

    if log_file_path:
        log_dir = Path(log_file_path).parent
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file_path)
        file_handler.setLevel(logging.DEBUG)
        file_formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s'
        )
        file_handler.setFormatter(file_formatter)
        handlers.append(file_handler)

    if console_output or debug:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(logging.DEBUG if debug else logging.WARNING)
        console_formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
        console_handler.setFormatter(console_formatter)
        handlers.append(console_handler)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(logging.DEBUG if debug else getattr(logging, level.upper()))
    for handler in handlers:
        root_logger.addHandler(handler)

    # grpc / google-auth are chatty at DEBUG
    logging.getLogger("google").setLevel(logging.WARNING)

    logger.info("=" * 50)
    logger.info("wavscribe starting up")
    logger.info(f"Log file: {log_file_path}")
    logger.info(f"Log level set to: {logging.getLevelName(root_logger.level)}")
    logger.info("=" * 50)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wavscribe",
        description="Transcribe a mono 16-bit PCM WAV stream with Google Speech-to-Text",
        epilog="Credentials: set google_cloud.credentials_path in the config file or the "
               "GOOGLE_APPLICATION_CREDENTIALS environment variable to a service account JSON key."
    )

    parser.add_argument(
        "filename",
        nargs="?",
        help="Audio file to transcribe, a WAV container. Reads standard input if omitted."
    )

    parser.add_argument(
        "--config",
        type=str,
        help="Path to configuration YAML file"
    )

    parser.add_argument(
        "-l", "--lang",
        type=str,
        help="Transcription language code, e.g. en-US, fr-FR (default: en-US)"
    )

    parser.add_argument(
        "-c", "--chunk-duration",
        type=float,
        help="Maximum seconds of audio per transcription request, at most 60 (default: 10)"
    )

    parser.add_argument(
        "--min-duration",
        type=float,
        help="Minimum seconds of audio before a silence can end a segment (default: 2)"
    )

    parser.add_argument(
        "-s", "--silence-threshold",
        type=int,
        help="Frame energy below which a frame counts as silence (default: 100)"
    )

    parser.add_argument(
        "-r", "--eof-retries",
        type=int,
        help="Consecutive empty reads before the input is considered finished (default: 5)"
    )

    parser.add_argument(
        "--ordered",
        action="store_true",
        default=None,
        help="Print transcripts in stream order instead of completion order"
    )

    parser.add_argument(
        "-d", "--debug",
        action="store_true",
        help="Debug mode: per-frame diagnostics on stderr"
    )

    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Set logging level (default: INFO)"
    )

    parser.add_argument(
        "--version",
        action="version",
        version="wavscribe v0.1.0"
    )

    return parser


def apply_overrides(config: WavScribeConfig, args: argparse.Namespace) -> None:
    """Copy command line values over the config file's."""
    overrides = {
        'google_cloud.language': args.lang,
        'segmenter.max_audio_seconds': args.chunk_duration,
        'segmenter.min_audio_seconds': args.min_duration,
        'segmenter.silence_threshold': args.silence_threshold,
        'segmenter.eof_retries': args.eof_retries,
        'segmenter.ordered_output': args.ordered,
    }
    for key_path, value in overrides.items():
        if value is not None:
            config.set(key_path, value)


def main(argv=None) -> None:
    """Main entry point for wavscribe."""
    args = build_parser().parse_args(argv)

    server = None
    try:
        config = WavScribeConfig(args.config)
        apply_overrides(config, args)
        setup_logging(config, args.log_level or config.get('logging.level', 'INFO'), debug=args.debug)

        server = Server(config, args.filename)
        server.init()
        stats = server.run()
        logger.info(f"Done: {stats.dispatches} segment(s) sent, {stats.discards} discarded")
    except KeyboardInterrupt:
        if server is not None:
            server.cleanup()
        print("Interrupted", file=sys.stderr)
        sys.exit(130)
    except (WavScribeError, GoogleAuthError, ValueError, OSError) as e:
        if server is not None:
            server.cleanup()
        print(f"Error: {e}", file=sys.stderr)
        logger.error(f"Application error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
