from collections import deque
from tabulate import tabulate


def build_adjacency(nodes: list, edges: list):
    """
    Build and return adjacency maps, one for children and one for parents.
    Neighbours are kept in the order edges are listed (repeated edges are ignored).
    """
    children = {n: [] for n in nodes}
    parents = {n: [] for n in nodes}
    for u, v in edges:
        if u not in children or v not in parents:
            raise ValueError(f"Edge ({u}, {v}) refers to an unknown node")
        if v not in children[u]:
            children[u].append(v)
            parents[v].append(u)
    return {n: tuple(cs) for n, cs in children.items()}, {n: tuple(ps) for n, ps in parents.items()}


def topological_sort(nodes: list, children: dict, parents: dict):
    """Return nodes in a topological order"""
    # number of incoming edges to a node,
    # we will use this to track how many of a node's parents
    # we have already managed to put in order
    indegree = {n: len(parents[n]) for n in nodes}
    # nodes without incoming edges come first
    queue = deque([n for n in nodes if indegree[n] == 0])
    topo = []
    while queue:
        n = queue.popleft()  # when we pop a node, it's ready to go in order
        topo.append(n)
        for c in children[n]:  # as the parent was ordered, we update the children's counts
            indegree[c] -= 1
            if indegree[c] == 0:
                queue.append(c)

    if len(topo) != len(nodes):
        raise ValueError("Graph contains a cycle, topological sort not possible")
    return tuple(topo)


def compute_ancestors(nodes: list, parents: dict, topo: list):
    """Return for each node a set containing its ancestors"""
    ancestors = {n: set() for n in nodes}
    # go in topological order, so we can build ancestor sets incrementally
    # (the ancestors of a parent are ready by the time we get to its children)
    for n in topo:
        for p in parents[n]:
            ancestors[n].add(p)
            ancestors[n].update(ancestors[p])
    return {n: frozenset(a) for n, a in ancestors.items()}


def ancestral_closure(dag: 'DAG', start):
    """
    Return a list with `start` followed by all of its ancestors.

    The list is built depth-first: a node, then (recursively) each of its parents
    in the order they are listed, skipping nodes already collected.
    """
    closure = []
    stack = [start]
    while stack:
        node = stack.pop()
        if node in closure:
            continue
        closure.append(node)
        # reversed, so the first parent is the next one we pop
        stack.extend(p for p in reversed(dag.parents[node]) if p not in closure)
    return closure


class DAG:
    """
    A container for a directed acyclic graph.

    The container holds nodes that are string objects
    (or, at least, that overwrite the __str__ method).

    We store a tuple of nodes and a tuple of edges.
    For convenience of various DAG algs, we also store adjacency maps (for parents and children),
    a topological order of the nodes and the ancestors of each node.
    """

    def __init__(self, nodes: list, edges: list):
        """
        nodes: a list of string objects (or objects supporting str(obj))
        edges: a list of edges, each represented as a (parent, child) pair
        """
        self.nodes = tuple(str(node) for node in nodes)
        self.edges = tuple((str(parent), str(child)) for parent, child in edges)
        self.children, self.parents = build_adjacency(self.nodes, self.edges)
        self.topo = topological_sort(self.nodes, self.children, self.parents)
        self.ancestors = compute_ancestors(self.nodes, self.parents, self.topo)

    def __str__(self):
        """Generate a view of the graph using tabulate"""
        rows = []
        for node in self.topo:
            rows.append([", ".join(str(u) for u in self.parents[node]), str(node)])
        return tabulate(rows, headers=['parents', 'child'], tablefmt='grid')

    def __repr__(self):
        return str(self)


def _bounce(dag: DAG, node, end, evidence: set, came_from_child: bool, visited: set):
    """
    Return True if the ball, having arrived at `node`, can go on and reach `end`.

    came_from_child: True if we arrived at node from one of its children (travelling up)
    visited: nodes entered so far (shared by all branches of one search)
    """
    visited.add(node)
    if node == end:
        return True

    if node in evidence:
        # an observed node blocks anything coming up from below
        if came_from_child:
            return False
        # coming from above, an observed node bounces the ball up to its parents
        return any(_bounce(dag, p, end, evidence, True, visited) for p in dag.parents[node])

    # unobserved nodes pass the ball down to their children
    for c in dag.children[node]:
        if c not in visited and _bounce(dag, c, end, evidence, False, visited):
            return True
    # and, if the ball came up from below, also further up
    if came_from_child:
        return any(_bounce(dag, p, end, evidence, True, visited) for p in dag.parents[node])
    return False


def is_reachable(dag: DAG, start, end, evidence):
    """
    Return True if there is an active trail from start to end given the observed nodes (Bayes ball).

    The ball leaves `start` as if it had arrived there from above, so the test is not symmetric:
     callers deciding independence should check both directions (see `independent`).

    dag: a DAG
    start: the node the ball leaves from
    end: the node we try to reach
    evidence: observed nodes
    """
    evidence = set(evidence)
    # an unobserved common cause
    for p in dag.parents[start]:
        if p in dag.parents[end] and p not in evidence:
            return True
    # an observed common effect
    for c in dag.children[start]:
        if c in dag.children[end] and c in evidence:
            return True
    return _bounce(dag, start, end, evidence, False, set())


def independent(dag: DAG, a, b, evidence):
    """Return True if neither a reaches b nor b reaches a given the evidence."""
    return not is_reachable(dag, a, b, evidence) and not is_reachable(dag, b, a, evidence)
