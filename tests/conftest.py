import pytest
from loguru import logger

from bnquery.m3 import BayesianNetwork


@pytest.fixture
def toy_bn():
    """X -> Y, P(X=T) = 0.3, P(Y=T|X=T) = 0.8, P(Y=T|X=F) = 0.1"""
    return BayesianNetwork(
        variables=[("X", ["T", "F"]), ("Y", ["T", "F"])],
        cpts={
            "X": ((), [0.3, 0.7]),
            "Y": (("X",), [0.8, 0.2, 0.1, 0.9]),
        },
    )


@pytest.fixture
def collider_bn():
    """X -> Y <- Z"""
    return BayesianNetwork(
        variables=[("X", ["T", "F"]), ("Y", ["T", "F"]), ("Z", ["T", "F"])],
        cpts={
            "X": ((), [0.4, 0.6]),
            "Z": ((), [0.5, 0.5]),
            "Y": (("X", "Z"), [0.9, 0.1, 0.6, 0.4, 0.3, 0.7, 0.05, 0.95]),
        },
    )


@pytest.fixture
def alarm_bn():
    """B -> A <- E, A -> J, A -> M"""
    return BayesianNetwork(
        variables=[("B", ["T", "F"]), ("E", ["T", "F"]), ("A", ["T", "F"]), ("J", ["T", "F"]), ("M", ["T", "F"])],
        cpts={
            "B": ((), [0.001, 0.999]),
            "E": ((), [0.002, 0.998]),
            "A": (("B", "E"), [0.95, 0.05, 0.94, 0.06, 0.29, 0.71, 0.001, 0.999]),
            "J": (("A",), [0.9, 0.1, 0.05, 0.95]),
            "M": (("A",), [0.7, 0.3, 0.01, 0.99]),
        },
    )


@pytest.fixture
def three_valued_bn():
    """A -> B, A has three outcomes"""
    return BayesianNetwork(
        variables=[("A", ["a1", "a2", "a3"]), ("B", ["T", "F"])],
        cpts={
            "A": ((), [0.2, 0.5, 0.3]),
            "B": (("A",), [0.9, 0.1, 0.4, 0.6, 0.25, 0.75]),
        },
    )


ALARM_XML = """<?xml version="1.0"?>
<NETWORK>
    <VARIABLE><NAME>B</NAME><OUTCOME>T</OUTCOME><OUTCOME>F</OUTCOME></VARIABLE>
    <VARIABLE><NAME>E</NAME><OUTCOME>T</OUTCOME><OUTCOME>F</OUTCOME></VARIABLE>
    <VARIABLE><NAME>A</NAME><OUTCOME>T</OUTCOME><OUTCOME>F</OUTCOME></VARIABLE>
    <VARIABLE><NAME>J</NAME><OUTCOME>T</OUTCOME><OUTCOME>F</OUTCOME></VARIABLE>
    <VARIABLE><NAME>M</NAME><OUTCOME>T</OUTCOME><OUTCOME>F</OUTCOME></VARIABLE>
    <DEFINITION><FOR>B</FOR><TABLE>0.001 0.999</TABLE></DEFINITION>
    <DEFINITION><FOR>E</FOR><TABLE>0.002 0.998</TABLE></DEFINITION>
    <DEFINITION>
        <FOR>A</FOR><GIVEN>B</GIVEN><GIVEN>E</GIVEN>
        <TABLE>0.95 0.05 0.94 0.06 0.29 0.71 0.001 0.999</TABLE>
    </DEFINITION>
    <DEFINITION><FOR>J</FOR><GIVEN>A</GIVEN><TABLE>0.9 0.1 0.05 0.95</TABLE></DEFINITION>
    <DEFINITION><FOR>M</FOR><GIVEN>A</GIVEN><TABLE>0.7 0.3 0.01 0.99</TABLE></DEFINITION>
</NETWORK>
"""


@pytest.fixture
def alarm_xml(tmp_path):
    path = tmp_path / "alarm.xml"
    path.write_text(ALARM_XML)
    return path


@pytest.fixture(autouse=True)
def restore_logging():
    """The CLI replaces loguru's sinks and enables bnquery logs, undo that after each test"""
    yield
    logger.remove()
    logger.disable("bnquery")
