import argparse
import logging
import sys
from typing import List, Optional

from kiosk import config
from kiosk.client import JobClient
from kiosk.errors import KioskError
from kiosk.job_schema import JobStatus

EXIT_DONE = 0
EXIT_FAILED = 1
EXIT_ERROR = 2

def process_file(client: JobClient, file_path: str, job_type: str, expire_seconds: int,
                 poll_interval: float, max_attempts: Optional[int] = None) -> str:
    """Runs one file through the kiosk and prints the outcome. Returns the final status."""
    job = client.new_job(job_type)
    client.create(job, file_path)
    if not job.is_queued():
        raise KioskError(f"Kiosk did not queue a {job_type} job for {file_path}")
    print(f"Queued job {job.job_hash} ({job.job_type})")

    client.expire(job, expire_seconds)

    status = client.wait_for_final_status(job, poll_interval, max_attempts=max_attempts)
    if status == JobStatus.DONE:
        print("DONE")
        print(client.get_output_path(job))
    else:
        print("FAILED")
        print(client.get_error_reason(job))
    return status

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Submit an image to the kiosk and wait for the result.")
    parser.add_argument("file", nargs="?", help="Image (or zip archive) to upload")
    parser.add_argument("--job-type", help="Job type to run; defaults to the first type the server lists")
    parser.add_argument("--base-url", default=config.BASE_URL, help="Kiosk API root")
    parser.add_argument("--poll-interval", type=float, default=config.POLL_INTERVAL, help="Seconds between status polls")
    parser.add_argument("--expire-seconds", type=int, default=config.EXPIRE_SECONDS, help="TTL for the job record")
    parser.add_argument("--max-attempts", type=int, default=None, help="Give up after this many polls")
    parser.add_argument("--list-job-types", action="store_true", help="Print available job types and exit")
    return parser

def main(argv: Optional[List[str]] = None, client: Optional[JobClient] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=config.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    client = client or JobClient(args.base_url)
    try:
        if args.list_job_types:
            for job_type in client.get_job_types():
                print(job_type)
            return EXIT_DONE

        if not args.file:
            print("A file to upload is required", file=sys.stderr)
            return EXIT_ERROR

        job_type = args.job_type
        if not job_type:
            job_types = client.get_job_types()
            if not job_types:
                print("Kiosk reported no job types", file=sys.stderr)
                return EXIT_ERROR
            job_type = job_types[0]

        print(f"Processing {args.file}...")
        status = process_file(client, args.file, job_type, args.expire_seconds,
                              args.poll_interval, max_attempts=args.max_attempts)
    except KioskError as e:
        print(f"Kiosk error: {e}", file=sys.stderr)
        return EXIT_ERROR
    finally:
        client.close()

    return EXIT_DONE if status == JobStatus.DONE else EXIT_FAILED

if __name__ == "__main__":
    sys.exit(main())
