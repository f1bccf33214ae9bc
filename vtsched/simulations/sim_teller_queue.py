import os
import random
import sys

from loguru import logger

from vtsched import Scheduler

logger = logger.bind(module="vtsched.simulations.sim_teller_queue")


class SimTellerQueue:
    """
    Customers arrive at a single teller with random gaps and wait in line until
    served. Every arrival schedules the next arrival, and every service start
    schedules its own departure, all from inside the scheduler's callbacks.
    """

    def __init__(
        self,
        num_customers=20,
        mean_arrival=5.0,
        mean_service=4.0,
        random_seed=None,
    ):
        self.params = {
            "num_customers": num_customers,
            "mean_arrival": mean_arrival,
            "mean_service": mean_service,
            "random_seed": random_seed if random_seed is not None else random.randint(0, 2**32),
        }
        self.rng = random.Random(self.params["random_seed"])
        self.scheduler = Scheduler(origin=0.0)

        self.line = []  # (customer, arrived_at) waiting for the teller
        self.busy = False
        self.arrived = 0
        self.waits = {}  # customer -> time spent in line
        self.log = []  # (time, kind, customer), in dispatch order
        self.results = {}

    # Event handlers. Each one is scheduled with the scheduler and receives the
    # dispatch time as its only argument.
    def arrive(self, customer):
        def event(at):
            self.arrived += 1
            self.log.append((at, "arrive", customer))
            self.line.append((customer, at))
            if self.arrived < self.params["num_customers"]:
                gap = self.rng.expovariate(1.0 / self.params["mean_arrival"])
                self.scheduler.schedule_offset(self.arrive(customer + 1), gap)
            if not self.busy:
                self.start_service(at)
            return ("arrive", customer)

        event.__name__ = f"arrive_{customer}"
        return event

    def depart(self, customer):
        def event(at):
            self.log.append((at, "depart", customer))
            self.busy = False
            if self.line:
                self.start_service(at)
            return ("depart", customer)

        event.__name__ = f"depart_{customer}"
        return event

    def start_service(self, at):
        customer, arrived_at = self.line.pop(0)
        self.busy = True
        self.waits[customer] = at - arrived_at
        service = self.rng.expovariate(1.0 / self.params["mean_service"])
        self.scheduler.schedule(self.depart(customer), at + service)
        logger.debug(f"t={at:.2f} customer {customer} served after waiting {self.waits[customer]:.2f}")

    def run_scenario(self, until=None):
        self.scheduler.schedule(self.arrive(0), self.scheduler.now())
        dispatched = self.scheduler.run(until=until)
        served = sorted(c for kind, c in dispatched if kind == "depart")
        self.results["served"] = served
        self.results["still_queued"] = len(self.line)
        self.results["pending_events"] = self.scheduler.pending()
        self.results["mean_wait"] = sum(self.waits.values()) / len(self.waits) if self.waits else 0.0
        self.results["end_time"] = self.scheduler.now()
        logger.info(f"Finished at t={self.results['end_time']:.2f} with {len(served)} customers served")
        return self.results


def main():
    """Run one scenario; parameters may be overridden through SIM_* variables."""
    verbose = os.environ.get("SIM_VERBOSE", "").lower() in ("1", "true")
    # Replace loguru's default DEBUG sink; this module may run as __main__,
    # where the package-level disable does not reach.
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "INFO")
    if verbose:
        logger.enable("vtsched")
    sim = SimTellerQueue(
        num_customers=int(os.environ.get("SIM_CUSTOMERS", "20")),
        mean_arrival=float(os.environ.get("SIM_MEAN_ARRIVAL", "5.0")),
        mean_service=float(os.environ.get("SIM_MEAN_SERVICE", "4.0")),
        random_seed=int(os.environ.get("SIM_SEED", "7")),
    )
    sim.run_scenario()
    print(sim.params)
    print(sim.results)


if __name__ == "__main__":
    main()
