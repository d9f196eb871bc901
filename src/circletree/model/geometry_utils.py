from __future__ import annotations

from math import sqrt

from circletree.config import EPSILON
from circletree.model.geometry_primitives import Point, Vector


def intersect_circles(
    c1: Point,
    r1: float,
    c2: Point,
    r2: float,
    *,
    eps: float = EPSILON
    ) -> list[Point]:
    """
    Compute the intersection point(s) of two circles.

    Args:
        c1: Center of the first circle.
        r1: Radius of the first circle.
        c2: Center of the second circle.
        r2: Radius of the second circle.
        eps: Numerical tolerance for the containment/separation and tangency tests.

    Returns:
        A list containing 0, 1, or 2 points. For tangency (h ~ 0) a single point
        is returned.

    Notes:
        - With d = |c2 - c1| and u = (c2 - c1) / d, the chord midpoint lies at
          c1 + a*u where a = (r1^2 - r2^2 + d^2) / (2d); the points are offset
          from it along the normal of u by h = sqrt(r1^2 - a^2).
        - Concentric circles (d ~ 0) have no finite intersection set and
          return [].
    """
    offset = c2 - c1
    d = offset.magnitude

    if d < eps:
        return []

    if d < abs(r2 - r1) - eps or d > r1 + r2 + eps:
        return []

    u = offset / d
    n = u.perpendicular()
    a = (r1 * r1 - r2 * r2 + d * d) / (2.0 * d)
    # clamp: within eps of the tangent configuration r1^2 - a^2 may round below zero
    h = sqrt(max(0.0, r1 * r1 - a * a))

    base = c1 + u * a
    if abs(h) <= eps:
        return [base]
    return [base + n * h, base - n * h]


def place_on_chord_from_midpoint(
    p1: Point,
    p2: Point,
    r: float,
    *,
    eps: float = EPSILON
    ) -> list[Point]:
    """
    Find the center of a circle of radius `r` passing through both `p1` and `p2`.

    Of the two mirror solutions only the one on the left of the directed
    segment p1 -> p2 (along its normal (-dy, dx)) is returned; swap the
    arguments to get the other one.

    Returns:
        [center] or [] if the chord is longer than the diameter.
    """
    offset = p2 - p1
    dq = offset.dot(offset)
    h = r * r - dq / 4.0
    if h < -eps:
        return []

    n = offset.normalize().perpendicular()
    return [p1.midpoint(p2) + n * sqrt(max(0.0, h))]


def place_in_local_frame(
    p1: Point,
    p2: Point,
    local_offset: Point,
    invert: bool = False
    ) -> Point:
    """
    Map a point given in the local frame spanned by two reference points to model space.

    The frame is anchored at the midpoint of p1, p2; its x-axis is the unit
    vector p1 -> p2 and its y-axis the normal to it (flipped when `invert`).
    """
    forward = (p2 - p1).normalize()
    normal = forward.perpendicular()
    if invert:
        normal = -normal
    return p1.midpoint(p2) + forward * local_offset.x + normal * local_offset.y


def project_center_through(anchor: Point, center: Point, radius: float) -> Point:
    """
    Move `center` along the ray anchor -> center so the circle passes through `anchor`.
    """
    direction: Vector = (center - anchor).normalize()
    return anchor + direction * radius
