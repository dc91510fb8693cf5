"""
write_load.py — fire creation requests at a running short link service

Usage:
  python write_load.py --base http://127.0.0.1:8080 --domain example.com --count 2000 --concurrency 100

Modes:
  default        random paths, exercises the UUID branch (every link distinct)
  --process-ids  embeds a fresh 64-hex process id per request (content-derived links)
  --repeat-pid   reuses one process id for every request; all links must match

Created links are appended to --out as JSON lines {"link", "url"}.
"""
import argparse
import asyncio
import json
import secrets
import statistics
import time
from typing import List, Optional

import httpx


def _target_path(mode: str, fixed_pid: str) -> str:
    slug = secrets.token_urlsafe(6)
    if mode == "process-ids":
        return f"{slug}/{secrets.token_hex(32)}"
    if mode == "repeat-pid":
        return f"{slug}/{fixed_pid}"
    return slug


async def _create(client: httpx.AsyncClient, base: str, domain: str, path: str) -> Optional[str]:
    try:
        r = await client.get(f"{base}/add/{domain}/{path}", timeout=10)
        r.raise_for_status()
        return r.json()["link"]
    except (httpx.HTTPError, ValueError, KeyError):
        return None


async def run(args) -> int:
    mode = "repeat-pid" if args.repeat_pid else "process-ids" if args.process_ids else "random"
    fixed_pid = secrets.token_hex(32)
    latencies: List[float] = []
    links: List[str] = []
    failures = 0

    limits = httpx.Limits(max_connections=args.concurrency, max_keepalive_connections=args.concurrency)
    sem = asyncio.Semaphore(args.concurrency)

    with open(args.out, "a", encoding="utf-8") as out_f:
        async with httpx.AsyncClient(limits=limits) as client:

            async def _one():
                nonlocal failures
                path = _target_path(mode, fixed_pid)
                async with sem:
                    t = time.perf_counter()
                    link = await _create(client, args.base, args.domain, path)
                    latencies.append((time.perf_counter() - t) * 1000.0)
                if link is None:
                    failures += 1
                    return
                links.append(link)
                out_f.write(json.dumps({"link": link, "url": f"https://{args.domain}/{path}"}) + "\n")

            t0 = time.perf_counter()
            await asyncio.gather(*(_one() for _ in range(args.count)))
            elapsed = time.perf_counter() - t0

    ok = len(links)
    print(f"mode={mode} requests={args.count} ok={ok} failed={failures} distinct_links={len(set(links))}")
    if elapsed > 0:
        print(f"elapsed={elapsed:.3f}s rate={ok / elapsed:.1f} req/s")
    if len(latencies) >= 2:
        cuts = statistics.quantiles(latencies, n=100)
        print(f"latency p50={cuts[49]:.2f}ms p95={cuts[94]:.2f}ms")
    if mode == "repeat-pid" and len(set(links)) > 1:
        print("ERROR: repeated process id produced more than one link")
        return 1
    return 0 if failures == 0 else 2


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("--base", default="http://127.0.0.1:8080")
    parser.add_argument("--domain", default="example.com")
    parser.add_argument("--count", type=int, default=2000)
    parser.add_argument("--concurrency", type=int, default=100)
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--process-ids", action="store_true")
    group.add_argument("--repeat-pid", action="store_true")
    parser.add_argument("--out", default="links_created.jsonl")
    return asyncio.run(run(parser.parse_args()))


if __name__ == "__main__":
    raise SystemExit(main())
