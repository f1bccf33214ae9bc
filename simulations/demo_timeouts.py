"""Toy request/timeout demo on a wall-calendar virtual clock.

A client sends requests to a slow server. Each request arms a timeout; the
response and the timeout race on the scheduler and whichever is dispatched
first decides the outcome. The clock uses `datetime` instants and
`timedelta` offsets to show that virtual time need not be a number.

Workload: five requests, one second apart; server latency is random between
0.5s and 3s; the client gives up after 2s. We run for ten virtual seconds,
print the queue, then shut down by discarding whatever is still pending.
"""

import random
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Dict, List

from vtsched import Scheduler

TIMEOUT = timedelta(seconds=2)


@dataclass
class Client:
    scheduler: Scheduler
    rng: random.Random
    outcomes: Dict[int, str] = field(default_factory=dict)
    trace: List[str] = field(default_factory=list)

    def send(self, req_id: int) -> None:
        latency = timedelta(milliseconds=self.rng.randint(500, 3000))
        self.scheduler.schedule_offset(self._on_response(req_id), latency)
        self.scheduler.schedule_offset(self._on_timeout(req_id), TIMEOUT)

    def _on_response(self, req_id):
        def on_response(at: datetime):
            # First event to fire for a request wins; the other is ignored.
            if req_id not in self.outcomes:
                self.outcomes[req_id] = "ok"
                self.trace.append(f"{at:%H:%M:%S.%f} req {req_id} ok")
            return req_id, "response"

        return on_response

    def _on_timeout(self, req_id):
        def on_timeout(at: datetime):
            if req_id not in self.outcomes:
                self.outcomes[req_id] = "timeout"
                self.trace.append(f"{at:%H:%M:%S.%f} req {req_id} timed out")
            return req_id, "timeout"

        return on_timeout


def main():
    origin = datetime(2024, 1, 1, 9, 0, 0)
    scheduler = Scheduler(origin=origin)
    client = Client(scheduler, random.Random(3))

    for i in range(5):

        def fire(at, i=i):
            client.send(i)
            return i, "sent"

        scheduler.schedule(fire, origin + timedelta(seconds=i))

    scheduler.run(until=origin + timedelta(seconds=4, milliseconds=500))
    print("\n".join(client.trace))
    print()
    print(scheduler.dump_state(10))

    # Shut down: drop everything still queued but account for its time.
    scheduler.remove_all_update()
    print()
    print(f"Shut down at {scheduler.now():%H:%M:%S.%f}; outcomes = {client.outcomes}")


if __name__ == "__main__":
    main()
