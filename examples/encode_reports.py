"""
Example: encode simulated client values into RAPPOR reports.

Goal:
    Show both encoders side by side. The same value always gets the same
    permanent response, while the instantaneous response changes per report.
    Only the report bytes would be sent to a collector.

Usage:
    python examples/encode_reports.py
    python examples/encode_reports.py --num-bits 32 --num-hashes 2 --reports 5
"""
import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

project_root = Path(__file__).resolve().parents[1]
src_root = project_root / "src"
if str(src_root) not in sys.path:
    sys.path.insert(0, str(src_root))

from rappor import DigestEncoder, Encoder, Params, SeededDeterministicRand, SimpleIrrRand, SimpleRand
from rappor.bit_utils import bit_string
from rappor.utils import configure_logging, create_rng


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="RAPPOR report encoding")
    parser.add_argument("--seed", type=int, default=0, help="Seed for the per-report noise (default: 0)")
    parser.add_argument("--num-bits", type=int, default=16, help="Bloom filter width (default: 16)")
    parser.add_argument("--num-hashes", type=int, default=2, help="Bits set per value (default: 2)")
    parser.add_argument("--reports", type=int, default=3, help="Reports per value (default: 3)")
    parser.add_argument("--secret", type=str, default="client-secret", help="Key for the digest encoder PRR")
    parser.add_argument("--log-level", type=str, default="WARNING")
    parser.add_argument("values", nargs="*", default=["chrome", "firefox", "safari"])
    return parser


def main(argv: Optional[List[str]] = None) -> dict:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    params = Params(num_bits=args.num_bits, num_hashes=args.num_hashes, prob_f=0.5, prob_p=0.5, prob_q=0.75)
    rand = SimpleRand(params, rng=create_rng(args.seed))
    irr_rand = SimpleIrrRand(params, rng=create_rng(args.seed + 1))

    encoders = {
        "direct": Encoder("browser", 0, params, SeededDeterministicRand(params), rand),
        "digest": DigestEncoder("browser", 0, params, irr_rand, secret=args.secret),
    }

    result = {"params": params.to_dict(), "encoders": {}}
    for name, encoder in encoders.items():
        if not encoder.is_valid():
            result["encoders"][name] = {"valid": False}
            continue
        rows = []
        for value in args.values:
            stages = [encoder.encode_stages(value) for _ in range(args.reports)]
            rows.append(
                {
                    "value": value,
                    "bloom": bit_string(stages[0].bloom, params.num_bits),
                    "prr": bit_string(stages[0].prr, params.num_bits),
                    "reports": [s.report.hex() for s in stages],
                }
            )
        result["encoders"][name] = {"valid": True, "metadata": dict(encoder.get_metadata()), "rows": rows}
    return result


if __name__ == "__main__":
    print(json.dumps(main(), indent=2))
