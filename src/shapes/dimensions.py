from dataclasses import dataclass


@dataclass(frozen=True)
class Dimensions:
    """Width/height pair for an image, a container or a displayed area."""
    width: float
    height: float

    @classmethod
    def of(cls, sized):
        # accepts anything with get_size() (pygame surfaces) or a (w, h) pair
        if hasattr(sized, 'get_size'):
            w, h = sized.get_size()
        else:
            w, h = sized
        return cls(w, h)

    def is_empty(self):
        return self.width <= 0 or self.height <= 0
