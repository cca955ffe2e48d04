"""
Topological Sorter for isosort

Turns the relation graph into a dense draw order. Objects with nothing
behind them are the roots; a post-order walk over Fronts pushes every
object after everything drawn in front of it, and popping the result
hands out orders starting from the farthest object.

Cycles are tolerated: an object is visited at most once, so the walk is
bounded by O(V + E) and every object still receives exactly one order.
"""

import logging
from typing import Dict, List, Sequence

from .isoobject import IsometricObject

logger = logging.getLogger(__name__)


class TopologySorter:
    """
    Assigns IsometricObject.order from the Fronts/Backs graph.

    Roots are taken in the order of the list passed to sort() (the world
    passes registration order), and each object's Fronts are walked in
    that same order, so the result is deterministic for a fixed graph.
    Objects unreachable from any root (members of a cycle with no way in)
    start extra walks afterwards, again in list order.
    """

    def __init__(self):
        self.roots: List[IsometricObject] = []
        self._visited = set()
        self._sorted: List[IsometricObject] = []
        self._index: Dict[IsometricObject, int] = {}

    def sort(self, objects: Sequence[IsometricObject]) -> List[IsometricObject]:
        """
        Assign orders 0..N-1 to objects.

        Args:
            objects: Objects of this pass with freshly built relations

        Returns:
            The objects in draw order (order 0 first)
        """
        self.roots = []
        self._visited = set()
        self._sorted = []
        self._index = {obj: i for i, obj in enumerate(objects)}

        self.roots = [obj for obj in objects if not self._backs_in_pass(obj)]

        for root in self.roots:
            self._search(root)

        unreached = 0
        for obj in objects:
            if obj not in self._visited:
                unreached += 1
                self._search(obj)
        if unreached:
            logger.debug("%d objects unreachable from roots (cyclic relations)", unreached)

        draw_order = []
        order = 0
        while self._sorted:
            obj = self._sorted.pop()
            obj.order = order
            draw_order.append(obj)
            order += 1

        return draw_order

    def _backs_in_pass(self, obj: IsometricObject) -> bool:
        return any(back in self._index for back in obj.backs)

    def _ordered_fronts(self, obj: IsometricObject) -> List[IsometricObject]:
        index = self._index
        return sorted((front for front in obj.fronts if front in index), key=index.__getitem__)

    def _search(self, start: IsometricObject) -> None:
        """Post-order walk over Fronts from start, pushing onto the sorted stack."""
        if start in self._visited:
            return
        self._visited.add(start)

        # Each frame holds an object and the iterator over its remaining fronts
        stack = [(start, iter(self._ordered_fronts(start)))]
        while stack:
            obj, fronts = stack[-1]
            for front in fronts:
                if front not in self._visited:
                    self._visited.add(front)
                    stack.append((front, iter(self._ordered_fronts(front))))
                    break
            else:
                stack.pop()
                self._sorted.append(obj)
