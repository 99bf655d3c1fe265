"""Re-enqueue scoring for applicants that were never processed.

An applicant left in status ``New`` with no ``processed_at`` is the symptom of
a scoring run that aborted (missing questionnaire, database write failure,
worker crash). Once the cause is fixed, run:

  python scripts/requeue_unprocessed.py [--tenant 3] [--older-than-minutes 15] [--dry-run]
"""

import argparse
import os
import sys
from datetime import datetime, timedelta, timezone

ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from app import create_app
from app.extensions import rq
from app.jobs.process_applicant import process_new_applicant
from app.models import Applicant


def find_unprocessed(tenant_id=None, older_than_minutes=15):
    cutoff = datetime.now(timezone.utc) - timedelta(minutes=older_than_minutes)
    q = Applicant.query.filter(Applicant.processed_at.is_(None), Applicant.submitted_at <= cutoff)
    if tenant_id is not None:
        q = q.filter(Applicant.tenant_id == tenant_id)
    return q.order_by(Applicant.id).all()


def main(argv=None):
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument('--tenant', type=int, default=None)
    parser.add_argument('--older-than-minutes', type=int, default=15,
                        help='skip applicants submitted more recently than this (their job may still be queued)')
    parser.add_argument('--dry-run', action='store_true')
    args = parser.parse_args(argv)

    app = create_app()
    with app.app_context():
        rows = find_unprocessed(args.tenant, args.older_than_minutes)
        for a in rows:
            print(f'applicant {a.id} tenant {a.tenant_id} submitted {a.submitted_at}')
            if not args.dry_run:
                rq.enqueue(process_new_applicant, a.id)
        print(f'{len(rows)} applicant(s) {"found" if args.dry_run else "re-enqueued"}')
    return 0


if __name__ == '__main__':
    sys.exit(main())
