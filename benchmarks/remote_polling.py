"""Polling overhead benchmark for the remote solver."""

from __future__ import annotations

import asyncio
import logging
import time

import httpx

from pddlflow import PollPolicy, RemoteSolver, SolverSettings


def build_service(pending_polls: int):
    polls: dict[str, int] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "POST":
            job = f"/check/{len(polls)}"
            polls[job] = 0
            return httpx.Response(200, json={"status": "ok", "result": job})
        polls[request.url.path] += 1
        if polls[request.url.path] <= pending_polls:
            return httpx.Response(200, json={"status": "PENDING", "result": {}})
        return httpx.Response(200, json={"status": "ok", "result": {"output": {"sas_plan": "(pick a b)\n"}}})

    return handler


async def main(total_solves: int = 200, pending_polls: int = 3) -> None:
    logging.getLogger("pddlflow.remote").setLevel(logging.CRITICAL)
    settings = SolverSettings(
        base_url="http://bench.local",
        poll=PollPolicy(max_attempts=pending_polls + 1, base_delay_s=0.0),
    )
    transport = httpx.MockTransport(build_service(pending_polls))

    async with httpx.AsyncClient(transport=transport) as client:
        solver = RemoteSolver(settings=settings, client=client)
        start = time.perf_counter()
        for _ in range(total_solves):
            await solver.solve("(define (domain d))", "(define (problem p))")
        elapsed = time.perf_counter() - start

    rate = total_solves / elapsed if elapsed else float("inf")
    print(
        f"Polling benchmark: {total_solves} solves with {pending_polls} pending polls in "
        f"{elapsed:.3f}s -> {rate:.1f} solves/s"
    )


if __name__ == "__main__":  # pragma: no cover
    asyncio.run(main())
