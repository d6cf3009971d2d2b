"""
Coordinate layouts.

Maps a named layout (XY, XYZ, XYM, XYZM) to the number of numbers stored
per vertex and to the positions of the Z and M components.
"""

from enum import Enum
from typing import NamedTuple, Optional, Sequence, Union

from .errors import InvalidLayout


class GeometryLayout(str, Enum):
    """Supported per-vertex layouts."""

    XY = 'XY'
    XYZ = 'XYZ'
    XYM = 'XYM'
    XYZM = 'XYZM'


DEFAULT_LAYOUT = GeometryLayout.XY

LayoutLike = Union[GeometryLayout, str]


class ResolvedLayout(NamedTuple):
    """
    Stride and optional components of a layout.

    Unpacks as ``(stride, has_z, has_m)``.
    """
    stride: int
    has_z: bool
    has_m: bool

    @property
    def z_index(self) -> Optional[int]:
        return 2 if self.has_z else None

    @property
    def m_index(self) -> Optional[int]:
        if not self.has_m:
            return None
        return 3 if self.has_z else 2


_RESOLVED = {
    GeometryLayout.XY: ResolvedLayout(2, False, False),
    GeometryLayout.XYZ: ResolvedLayout(3, True, False),
    GeometryLayout.XYM: ResolvedLayout(3, False, True),
    GeometryLayout.XYZM: ResolvedLayout(4, True, True),
}

# A 3-component tuple without an explicit layout is read as XYZ
_LAYOUT_FOR_STRIDE = {
    2: GeometryLayout.XY,
    3: GeometryLayout.XYZ,
    4: GeometryLayout.XYZM,
}


def as_layout(layout: LayoutLike) -> GeometryLayout:
    """
    Coerce a layout tag to a GeometryLayout member.

    Parameters
    ----------
    layout : GeometryLayout or str
        Layout member or its tag, e.g. ``"XYZ"``.

    Returns
    -------
    GeometryLayout
        The matching layout.

    Raises
    ------
    InvalidLayout
        If the tag is not a known layout.
    """
    if isinstance(layout, GeometryLayout):
        return layout
    try:
        return GeometryLayout(layout)
    except ValueError:
        raise InvalidLayout(f"Unknown layout {layout!r}") from None


def layout_for_stride(stride: int) -> GeometryLayout:
    """Return the default layout for a stride of 2, 3 or 4."""
    try:
        return _LAYOUT_FOR_STRIDE[stride]
    except (KeyError, TypeError):
        raise InvalidLayout(f"Unsupported stride {stride!r}, expected 2, 3 or 4") from None


def get_stride(layout: LayoutLike) -> int:
    return _RESOLVED[as_layout(layout)].stride


def resolve_layout(
    layout: Optional[LayoutLike] = None,
    sample: Optional[Sequence[float]] = None
) -> ResolvedLayout:
    """
    Resolve a layout to its stride and Z/M flags.

    Parameters
    ----------
    layout : GeometryLayout or str, optional
        Requested layout. If None, the layout is inferred from the length
        of ``sample`` (2 -> XY, 3 -> XYZ, 4 -> XYZM), falling back to XY
        when there is no sample.
    sample : sequence of float, optional
        One vertex of the data the layout will describe.

    Returns
    -------
    ResolvedLayout
        ``(stride, has_z, has_m)``.

    Raises
    ------
    InvalidLayout
        If the tag is unknown, no layout fits the sample, or the sample
        length disagrees with the requested layout.
    """
    if layout is None:
        if sample is None:
            return _RESOLVED[DEFAULT_LAYOUT]
        return _RESOLVED[layout_for_stride(len(sample))]

    resolved = _RESOLVED[as_layout(layout)]
    if sample is not None and len(sample) != resolved.stride:
        raise InvalidLayout(
            f"Layout {as_layout(layout).value} expects {resolved.stride} components, "
            f"got a vertex with {len(sample)}"
        )
    return resolved


def infer_layout(
    layout: Optional[LayoutLike] = None,
    sample: Optional[Sequence[float]] = None
) -> GeometryLayout:
    """Like resolve_layout() but return the layout member itself."""
    if layout is None:
        return DEFAULT_LAYOUT if sample is None else layout_for_stride(len(sample))
    resolve_layout(layout, sample)
    return as_layout(layout)
