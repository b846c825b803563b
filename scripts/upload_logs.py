"""Entry point that ships the sensor's DNS and connection logs to the collector."""

from __future__ import annotations

import argparse
import logging
import signal
import sys
from pathlib import Path

from dotenv import load_dotenv

# Ensure project root is on sys.path when running as a script
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from sensor_uploader.config import Settings
from sensor_uploader.delivery_client import CollectorClient
from sensor_uploader.errors import (
    ApiGoneError,
    PreparationError,
    UploadCancelledError,
    UploadError,
)
from sensor_uploader.compression import zlib_decompress
from sensor_uploader.models import CancelSignal, CompressedEnvelope
from sensor_uploader.uploader import LogUploader
from sensor_uploader.utils import sha256_hex

load_dotenv()

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_BAD_INPUT = 2
EXIT_GONE = 3
EXIT_CANCELLED = 130


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Upload DNS and connection logs to the collector.")
    parser.add_argument("--dns-log", type=Path, help="DNS log path (overrides DNS_LOG_PATH)")
    parser.add_argument("--conn-log", type=Path, help="Connection log path (overrides CONN_LOG_PATH)")
    parser.add_argument("--dry-run", action="store_true", help="Build the payload without uploading it")
    return parser


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def install_signal_handlers(cancel: CancelSignal) -> None:
    def _handle(signum, _frame):
        logging.warning("Received signal %s; cancelling upload", signum)
        cancel.cancel(signal.Signals(signum).name)

    signal.signal(signal.SIGINT, _handle)
    signal.signal(signal.SIGTERM, _handle)


def run(args: argparse.Namespace, settings: Settings, uploader: LogUploader, cancel: CancelSignal) -> int:
    files = settings.log_files(dns_path=args.dns_log, conn_path=args.conn_log)

    if args.dry_run:
        try:
            payload = uploader.preparer.prepare(files)
        except PreparationError as exc:
            logging.error("%s", exc)
            return EXIT_BAD_INPUT
        envelope = CompressedEnvelope.from_json(zlib_decompress(payload))
        logging.info(
            "[DRY-RUN] Would upload %d bytes (sha256=%s, dns=%d b64 chars, conn=%d b64 chars) to %s",
            len(payload),
            sha256_hex(payload),
            len(envelope.dns),
            len(envelope.conn),
            settings.upload_endpoint,
        )
        return EXIT_OK

    try:
        result = uploader.upload_logs(files, cancel)
    except ApiGoneError as exc:
        logging.error("%s", exc)
        return EXIT_GONE
    except PreparationError as exc:
        logging.error("%s", exc)
        return EXIT_BAD_INPUT
    except UploadCancelledError as exc:
        logging.warning("%s", exc)
        return EXIT_CANCELLED
    except UploadError as exc:
        logging.error("%s", exc)
        return EXIT_FAILED

    logging.info(
        "Run complete: attempts=%s payload_size=%s status=%s",
        result.attempts,
        result.payload_size,
        result.status,
    )
    return EXIT_OK


def main() -> None:
    parser = build_parser()
    args = parser.parse_args()

    settings = Settings()
    configure_logging(settings.log_level)

    cancel = CancelSignal()
    install_signal_handlers(cancel)

    uploader = LogUploader.from_settings(settings, CollectorClient(settings))
    sys.exit(run(args, settings, uploader, cancel))


if __name__ == "__main__":
    main()
