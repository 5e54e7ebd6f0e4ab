#!/usr/bin/env python3
"""Work off queued notification deliveries (ranking results, access links).

Jobs read the notification row through the Flask-SQLAlchemy session, so the
worker runs inside an app context. With ``--burst`` it drains the queues and
exits, which suits a cron-driven publish run.

Run from project root: python scripts/run_rq_worker.py [--burst] [queue ...]
"""
import os
import sys
import argparse

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from redis import Redis
from rq import Worker, Queue

from app import create_app


def main(argv=None):
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument('queues', nargs='*', default=['default'], help='queue names, default: default')
    parser.add_argument('--burst', action='store_true', help='exit once the queues are empty')
    args = parser.parse_args(argv)

    app = create_app()
    if app.config.get('RQ_SYNC'):
        app.logger.warning('RQ_SYNC is set: the app runs jobs inline and will not enqueue anything')
    conn = Redis.from_url(app.config['REDIS_URL'])
    with app.app_context():
        queues = [Queue(name, connection=conn) for name in args.queues]
        pending = sum(q.count for q in queues)
        app.logger.info('notification worker starting queues=%s pending=%d burst=%s',
                        ','.join(args.queues), pending, args.burst)
        worker = Worker(queues, connection=conn)
        worker.work(burst=args.burst, logging_level=app.config.get('LOG_LEVEL', 'INFO'))


if __name__ == '__main__':
    main()
