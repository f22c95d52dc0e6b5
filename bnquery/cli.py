import argparse
import sys
import xml.etree.ElementTree as ET
from loguru import logger
from bnquery.readwrite import read_network, read_queries, write_results
from bnquery.m5 import answer_batch


def build_parser():
    parser = argparse.ArgumentParser(
        prog="bnquery",
        description="Answer independence and posterior queries on a discrete Bayesian network",
    )
    parser.add_argument("input", nargs="?", default="input.txt", help="query file (first line names the network file)")
    parser.add_argument("-o", "--output", default="output.txt", help="where to write one result per query")
    parser.add_argument("-j", "--n-jobs", type=int, default=1, help="answer queries in parallel (-1 for all cores)")
    parser.add_argument("-v", "--verbose", action="store_true", help="log every join and elimination")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if args.verbose else "INFO")
    logger.enable("bnquery")

    try:
        network_path, requests = read_queries(args.input)
        bn = read_network(network_path)
    except (OSError, ValueError, ET.ParseError) as error:
        logger.error("Cannot load queries: {}", error)
        return 1

    results = answer_batch(bn, requests, n_jobs=args.n_jobs)
    write_results(results, args.output)
    logger.info("Wrote {} results to {}", len(results), args.output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
