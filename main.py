import time
import logging
import signal
import sys
import json
import argparse
import threading

from core.app_context import AppContext
from core.config_loader import load_config
from core.exceptions import ServiceException, SingleMatchIneligible
from core.matcher.dto import Actor, ActorRole
from database.database import db_session_scope, init_engine

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Set on SIGINT/SIGTERM; discovery checks it and cancels outstanding scoring
stop_event = threading.Event()


def signal_handler(sig, frame):
    logger.info("Shutdown signal received")
    stop_event.set()


signal.signal(signal.SIGINT, signal_handler)
signal.signal(signal.SIGTERM, signal_handler)


def _recruiter(args) -> Actor:
    return Actor(id=args.recruiter_id, role=ActorRole.RECRUITER, organization_id=args.organization_id)


def run_jobs_for_candidate(ctx: AppContext, session, args):
    discovery = ctx.candidate_discovery(session)
    if args.job_id:
        return discovery.get_single_match(args.candidate_id, args.job_id)
    if args.top:
        return discovery.get_top_matches(args.candidate_id, args.top, stop_event=stop_event)
    return discovery.discover_jobs_for_candidate(
        args.candidate_id, page=args.page, size=args.size, stop_event=stop_event
    )


def run_candidates_for_job(ctx: AppContext, session, args):
    discovery = ctx.recruiter_discovery(session)
    recruiter = _recruiter(args)
    if args.candidate_id:
        return discovery.get_single_match(recruiter, args.job_id, args.candidate_id)
    if args.top:
        return discovery.get_top_matches(recruiter, args.job_id, args.top, stop_event=stop_event)
    return discovery.discover_candidates_for_job(
        recruiter, args.job_id, page=args.page, size=args.size, stop_event=stop_event
    )


def run_applicants(ctx: AppContext, session, args):
    discovery = ctx.recruiter_discovery(session)
    return discovery.get_job_applicants(
        _recruiter(args), args.job_id, page=args.page, size=args.size, stop_event=stop_event
    )


def _to_json(result) -> str:
    if isinstance(result, list):
        return json.dumps([item.model_dump(mode="json") for item in result], indent=2)
    return result.model_dump_json(indent=2)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="CareerMatch discovery driver")
    parser.add_argument('--config', type=str, default='config.yaml', help='Path to config YAML')
    sub = parser.add_subparsers(dest='command', required=True)

    def add_paging(p):
        p.add_argument('--page', type=int, default=1, help='1-based page number')
        p.add_argument('--size', type=int, default=10, help='Page size')
        p.add_argument('--top', type=int, default=0, help='Return the top N matches instead of a page')

    p = sub.add_parser('jobs-for-candidate', help='Jobs matching a candidate')
    p.add_argument('candidate_id')
    p.add_argument('--job-id', help='Match against a single job instead')
    add_paging(p)
    p.set_defaults(handler=run_jobs_for_candidate)

    p = sub.add_parser('candidates-for-job', help="Candidates matching one of a recruiter's jobs")
    p.add_argument('recruiter_id')
    p.add_argument('job_id')
    p.add_argument('--organization-id')
    p.add_argument('--candidate-id', help='Match a single candidate instead')
    add_paging(p)
    p.set_defaults(handler=run_candidates_for_job)

    p = sub.add_parser('applicants', help="Applicants to a job, access-controlled")
    p.add_argument('recruiter_id')
    p.add_argument('job_id')
    p.add_argument('--organization-id')
    p.add_argument('--page', type=int, default=1)
    p.add_argument('--size', type=int, default=10)
    p.set_defaults(handler=run_applicants)

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    config = load_config(args.config)
    init_engine(config.database.url)
    ctx = AppContext.build(config)

    start = time.time()
    logger.info(f"Running {args.command}...")
    try:
        with db_session_scope() as session:
            result = args.handler(ctx, session, args)
    except SingleMatchIneligible as e:
        logger.info(f"Not eligible: {e} (reasons={e.reasons}, shortfall={e.shortfall})")
        print(json.dumps({"error": str(e), "reasons": e.reasons, "shortfall": e.shortfall}, indent=2))
        return 2
    except ServiceException as e:
        logger.error(f"{args.command} failed: {e}")
        return 1
    except ValueError as e:
        logger.error(f"{args.command} rejected: {e}")
        return 1

    print(_to_json(result))
    logger.info(f"{args.command} completed in {time.time() - start:.2f}s")
    return 0


if __name__ == "__main__":
    sys.exit(main())
