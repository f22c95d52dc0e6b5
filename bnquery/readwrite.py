"""
Reading networks and query files, writing results.

A network file is XML with one VARIABLE element per rv and one DEFINITION element per CPT:

    <NETWORK>
        <VARIABLE>
            <NAME>X</NAME>
            <OUTCOME>T</OUTCOME>
            <OUTCOME>F</OUTCOME>
        </VARIABLE>
        <DEFINITION>
            <FOR>Y</FOR>
            <GIVEN>X</GIVEN>
            <TABLE>0.8 0.2 0.1 0.9</TABLE>
        </DEFINITION>
        ...
    </NETWORK>

A query file names the network file on its first line, followed by one query per line:

    network.xml
    X-Y|              (are X and Y independent, no evidence?)
    A-B|C=T,D=F       (are A and B independent given C and D?)
    P(Y=T|) X         (P(Y=T), eliminating X)
    P(B=T|J=T,M=T) A-E
"""
import re
import xml.etree.ElementTree as ET
from pathlib import Path
from loguru import logger
from bnquery.m3 import BayesianNetwork
from bnquery.m5 import IndependenceQuery, PosteriorQuery, QueryFailure, render


POSTERIOR_RE = re.compile(r"^P\((?P<variable>[^=|()]+)=(?P<outcome>[^|()]+)(?:\|(?P<evidence>[^()]*))?\)\s*(?P<order>\S*)$")
INDEPENDENCE_RE = re.compile(r"^(?P<a>[^-|=\s]+)-(?P<b>[^-|=\s]+)\|(?P<evidence>\S*)$")


def _text(element, tag):
    child = element.find(tag)
    if child is None or child.text is None:
        raise ValueError(f"<{element.tag}> has no <{tag}>")
    return child.text.strip()


def parse_network(root: ET.Element) -> BayesianNetwork:
    """Build a BayesianNetwork from the root element of a network document"""
    variables = []
    for element in root.iter("VARIABLE"):
        outcomes = [outcome.text.strip() for outcome in element.findall("OUTCOME")]
        variables.append((_text(element, "NAME"), outcomes))

    cpts = dict()
    for element in root.iter("DEFINITION"):
        child = _text(element, "FOR")
        given = [g.text.strip() for g in element.findall("GIVEN")]
        try:
            values = [float(v) for v in _text(element, "TABLE").split()]
        except ValueError as error:
            raise ValueError(f"Bad TABLE for {child}: {error}") from None
        cpts[child] = (given, values)

    return BayesianNetwork(variables, cpts)


def read_network(path) -> BayesianNetwork:
    """Read a BayesianNetwork from an XML file"""
    logger.info("Reading network from {}", path)
    bn = parse_network(ET.parse(path).getroot())
    logger.info("Read {} variables", len(bn.variables))
    return bn


def _parse_evidence(text: str):
    """Parse 'A=a,B=b' into (('A', 'a'), ('B', 'b'))"""
    pairs = []
    for item in filter(None, (part.strip() for part in text.split(","))):
        name, sep, outcome = item.partition("=")
        if not sep or not name.strip() or not outcome.strip():
            raise ValueError(f"Bad evidence {item!r}, expected NAME=OUTCOME")
        pairs.append((name.strip(), outcome.strip()))
    return tuple(pairs)


def parse_query(line: str):
    """Parse one line of a query file into an IndependenceQuery or a PosteriorQuery"""
    line = line.strip()
    match = POSTERIOR_RE.match(line)
    if match:
        return PosteriorQuery(
            match["variable"].strip(),
            match["outcome"].strip(),
            _parse_evidence(match["evidence"] or ""),
            tuple(filter(None, match["order"].split("-"))),
        )
    match = INDEPENDENCE_RE.match(line)
    if match:
        evidence = _parse_evidence(match["evidence"])
        return IndependenceQuery(match["a"], match["b"], frozenset(name for name, _ in evidence))
    raise ValueError(f"Cannot parse query {line!r}")


def read_queries(path):
    """
    Read a query file, returning the path of the network file and the list of requests.
    A relative network path is taken relative to the query file's directory.
    A line that cannot be parsed becomes a QueryFailure in its slot, so it renders as "error"
     and the lines after it keep their positions.
    """
    path = Path(path)
    lines = path.read_text().splitlines()
    if not lines or not lines[0].strip():
        raise ValueError(f"{path} should name a network file on its first line")
    network_path = Path(lines[0].strip())
    if not network_path.is_absolute():
        network_path = path.parent / network_path

    requests = []
    for number, line in enumerate(lines[1:], start=2):
        if not line.strip():
            continue
        try:
            requests.append(parse_query(line))
        except ValueError as error:
            logger.error("{}, line {}: {}", path, number, error)
            requests.append(QueryFailure(line.strip(), f"line {number}: {error}"))
    return network_path, requests


def write_results(results, path):
    """Write one rendered line per result"""
    with open(path, "w") as f:
        for result in results:
            f.write(render(result) + "\n")
