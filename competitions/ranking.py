from typing import Iterable, Protocol, TypeVar


class HasGained(Protocol):
    @property
    def gained(self) -> int:
        ...


T = TypeVar("T", bound=HasGained)


def rank(participations: Iterable[T]) -> list[T]:
    """Order by gained, highest first.

    sorted() is stable, so entrants with equal gains keep the order Wise Old Man
    returned them in.
    """
    return sorted(participations, key=lambda p: p.gained, reverse=True)


def top_n(ranked: Iterable[T], n: int = 3) -> list[T]:
    return list(ranked)[: max(n, 0)]
