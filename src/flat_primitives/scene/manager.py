"""Scene manager coordinating flat primitives and material handles.

This module provides a high-level scene building API on top of the
primitive storage in scene.intersection. Materials are opaque to the
intersection layer: the manager only hands out integer handles, records the
name and parameters each handle was created with, and checks that every
primitive refers to a registered handle.

The SceneManager maintains:
- A material handle space with names and free-form parameters
- Host-side info records for every primitive
- Argument validation before anything is written to Taichi fields
- Scene serialization/configuration support
- Bounding box export for acceleration structure construction

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from flat_primitives.scene.manager import SceneManager
    >>> scene = SceneManager()
    >>> floor = scene.add_material("floor", {"albedo": (0.73, 0.73, 0.73)})
    >>> scene.add_plane(center=(0, 0, 0), normal=(0, 1, 0), material_id=floor)
    >>> scene.add_rect_xy(-1, 1, -1, 1, k=-5, material_id=floor)
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Any

import numpy as np
import numpy.typing as npt
import taichi.math as tm

from flat_primitives.scene.intersection import (
    MAX_PRIMITIVES,
    PrimitiveKind,
    add_disk,
    add_plane,
    add_rect_xy,
    add_rect_xz,
    add_rect_yz,
    clear_scene,
    compute_bounding_boxes,
    get_primitive_count,
)

logger = logging.getLogger(__name__)

# Type alias for 3D vectors
vec3 = tm.vec3

# Maximum number of material handles
MAX_MATERIALS = 1024

_RECT_KINDS = {
    "xy": PrimitiveKind.RECT_XY,
    "xz": PrimitiveKind.RECT_XZ,
    "yz": PrimitiveKind.RECT_YZ,
}


@dataclass
class MaterialInfo:
    """Information about a registered material handle.

    Attributes:
        material_id: The handle stored in primitives and hit records.
        name: Human-readable name.
        params: Material parameters as provided during creation. Never
            interpreted by the intersection layer.
    """

    material_id: int
    name: str
    params: dict[str, Any]


@dataclass
class PlaneInfo:
    """Information about a plane in the scene.

    Attributes:
        primitive_index: The slot in the primitive storage arrays.
        center: A point on the plane.
        normal: The plane normal.
        material_id: The material handle assigned to the plane.
    """

    primitive_index: int
    center: tuple[float, float, float]
    normal: tuple[float, float, float]
    material_id: int


@dataclass
class DiskInfo:
    """Information about a disk in the scene.

    Attributes:
        primitive_index: The slot in the primitive storage arrays.
        center: The center of the disk.
        normal: The normal of the supporting plane.
        radius: The disk radius.
        material_id: The material handle assigned to the disk.
    """

    primitive_index: int
    center: tuple[float, float, float]
    normal: tuple[float, float, float]
    radius: float
    material_id: int


@dataclass
class RectInfo:
    """Information about an axis-aligned rectangle in the scene.

    Attributes:
        primitive_index: The slot in the primitive storage arrays.
        orientation: "xy", "xz" or "yz", naming the two spanned axes.
        a0, a1: Extent along the first spanned axis.
        b0, b1: Extent along the second spanned axis.
        k: Offset along the remaining axis.
        material_id: The material handle assigned to the rectangle.
    """

    primitive_index: int
    orientation: str
    a0: float
    a1: float
    b0: float
    b1: float
    k: float
    material_id: int


@dataclass
class SceneConfig:
    """Configuration for scene serialization.

    Attributes:
        materials: List of material configurations.
        planes: List of plane configurations.
        disks: List of disk configurations.
        rects: List of rectangle configurations.
    """

    materials: list[dict[str, Any]] = field(default_factory=list)
    planes: list[dict[str, Any]] = field(default_factory=list)
    disks: list[dict[str, Any]] = field(default_factory=list)
    rects: list[dict[str, Any]] = field(default_factory=list)


def _as_triple(values: Any, name: str) -> tuple[float, float, float]:
    """Convert a 3-sequence to a float tuple.

    Raises:
        ValueError: If values does not have exactly three finite components.
    """
    if len(values) != 3:
        raise ValueError(f"{name} must have 3 components, got {len(values)}")
    triple = (float(values[0]), float(values[1]), float(values[2]))
    if not all(math.isfinite(c) for c in triple):
        raise ValueError(f"{name} must be finite, got {triple}")
    return triple


class SceneManager:
    """Scene builder for planes, disks and axis-aligned rectangles.

    Attributes:
        materials: List of MaterialInfo for all registered handles.
        planes: List of PlaneInfo for all planes in the scene.
        disks: List of DiskInfo for all disks in the scene.
        rects: List of RectInfo for all rectangles in the scene.

    Example:
        >>> scene = SceneManager()
        >>> white = scene.add_material("white", {"albedo": (0.73, 0.73, 0.73)})
        >>> light = scene.add_material("light", {"emit": (15.0, 15.0, 15.0)})
        >>> scene.add_rect_xz(213, 343, 227, 332, k=554, material_id=light)
        >>> scene.add_disk((0, 0, 0), (0, 1, 0), radius=2.0, material_id=white)
    """

    def __init__(self) -> None:
        """Initialize an empty scene."""
        self.materials: list[MaterialInfo] = []
        self.planes: list[PlaneInfo] = []
        self.disks: list[DiskInfo] = []
        self.rects: list[RectInfo] = []
        self._clear_all()

    def _clear_all(self) -> None:
        """Clear all scene data including Taichi fields."""
        clear_scene()
        self.materials.clear()
        self.planes.clear()
        self.disks.clear()
        self.rects.clear()

    def clear(self) -> None:
        """Clear the entire scene (primitives and material handles)."""
        self._clear_all()
        logger.debug("Scene cleared")

    # =========================================================================
    # Material Handles
    # =========================================================================

    def add_material(self, name: str, params: dict[str, Any] | None = None) -> int:
        """Register a material and return its opaque handle.

        Args:
            name: Human-readable material name.
            params: Material parameters, stored as given.

        Returns:
            The material handle.

        Raises:
            RuntimeError: If the maximum number of materials is exceeded.
        """
        material_id = len(self.materials)
        if material_id >= MAX_MATERIALS:
            raise RuntimeError(f"Maximum number of materials ({MAX_MATERIALS}) exceeded")

        info = MaterialInfo(material_id=material_id, name=name, params=dict(params or {}))
        self.materials.append(info)
        logger.debug("Registered material %d (%s)", material_id, name)
        return material_id

    def get_material_count(self) -> int:
        """Get the total number of registered material handles."""
        return len(self.materials)

    def get_material_info(self, material_id: int) -> MaterialInfo | None:
        """Get information about a material by handle.

        Returns:
            MaterialInfo for the material, or None if not found.
        """
        if 0 <= material_id < len(self.materials):
            return self.materials[material_id]
        return None

    def _check_material(self, material_id: int) -> None:
        if material_id < 0 or material_id >= len(self.materials):
            raise ValueError(f"Invalid material_id: {material_id}")

    # =========================================================================
    # Primitive Management
    # =========================================================================

    def add_plane(
        self,
        center: tuple[float, float, float],
        normal: tuple[float, float, float],
        material_id: int,
    ) -> int:
        """Add an infinite plane to the scene.

        Args:
            center: A point on the plane as (x, y, z).
            normal: The plane normal as (x, y, z). Stored as given; unit
                length is expected but not enforced.
            material_id: The material handle to assign to the plane.

        Returns:
            The primitive index of the added plane.

        Raises:
            RuntimeError: If the maximum number of primitives is exceeded.
            ValueError: If a vector is not finite, the normal is zero, or
                material_id is invalid.
        """
        self._check_material(material_id)
        center = _as_triple(center, "center")
        normal = _as_triple(normal, "normal")
        if normal == (0.0, 0.0, 0.0):
            raise ValueError("Plane normal must be non-zero")

        index = add_plane(vec3(*center), vec3(*normal), material_id)
        self.planes.append(
            PlaneInfo(primitive_index=index, center=center, normal=normal, material_id=material_id)
        )
        logger.debug("Added plane %d through %s with normal %s", index, center, normal)
        return index

    def add_disk(
        self,
        center: tuple[float, float, float],
        normal: tuple[float, float, float],
        radius: float,
        material_id: int,
    ) -> int:
        """Add a disk to the scene.

        Args:
            center: The center of the disk as (x, y, z).
            normal: The normal of the supporting plane as (x, y, z).
            radius: The disk radius (must be positive).
            material_id: The material handle to assign to the disk.

        Returns:
            The primitive index of the added disk.

        Raises:
            RuntimeError: If the maximum number of primitives is exceeded.
            ValueError: If a vector or the radius is not finite, the normal is
                zero, the radius is not positive, or material_id is invalid.
        """
        self._check_material(material_id)
        center = _as_triple(center, "center")
        normal = _as_triple(normal, "normal")
        if normal == (0.0, 0.0, 0.0):
            raise ValueError("Disk normal must be non-zero")
        if not (radius > 0.0 and math.isfinite(radius)):
            raise ValueError(f"Disk radius = {radius} must be positive and finite")

        index = add_disk(vec3(*center), vec3(*normal), radius, material_id)
        self.disks.append(
            DiskInfo(
                primitive_index=index,
                center=center,
                normal=normal,
                radius=float(radius),
                material_id=material_id,
            )
        )
        logger.debug("Added disk %d at %s with radius %s", index, center, radius)
        return index

    def add_rect(
        self,
        orientation: str,
        a0: float,
        a1: float,
        b0: float,
        b1: float,
        k: float,
        material_id: int,
    ) -> int:
        """Add an axis-aligned rectangle to the scene.

        Args:
            orientation: "xy", "xz" or "yz", naming the two spanned axes.
            a0: Lower bound along the first spanned axis.
            a1: Upper bound along the first spanned axis.
            b0: Lower bound along the second spanned axis.
            b1: Upper bound along the second spanned axis.
            k: Offset along the remaining axis.
            material_id: The material handle to assign to the rectangle.

        Returns:
            The primitive index of the added rectangle.

        Raises:
            RuntimeError: If the maximum number of primitives is exceeded.
            ValueError: If the orientation is unknown, an extent is empty or
                inverted, a bound is not finite, or material_id is invalid.
        """
        self._check_material(material_id)
        kind = _RECT_KINDS.get(orientation.lower())
        if kind is None:
            raise ValueError(f"Unknown rectangle orientation: {orientation}")
        bounds = (float(a0), float(a1), float(b0), float(b1), float(k))
        if not all(math.isfinite(b) for b in bounds):
            raise ValueError(f"Rectangle bounds must be finite, got {bounds}")
        if not (a0 < a1 and b0 < b1):
            raise ValueError(
                f"Rectangle extents must satisfy a0 < a1 and b0 < b1, got "
                f"[{a0}, {a1}] x [{b0}, {b1}]"
            )

        if kind == PrimitiveKind.RECT_XY:
            index = add_rect_xy(a0, a1, b0, b1, k, material_id)
        elif kind == PrimitiveKind.RECT_XZ:
            index = add_rect_xz(a0, a1, b0, b1, k, material_id)
        else:
            index = add_rect_yz(a0, a1, b0, b1, k, material_id)

        self.rects.append(
            RectInfo(
                primitive_index=index,
                orientation=orientation.lower(),
                a0=bounds[0],
                a1=bounds[1],
                b0=bounds[2],
                b1=bounds[3],
                k=bounds[4],
                material_id=material_id,
            )
        )
        logger.debug("Added rect_%s %d at k=%s", orientation.lower(), index, k)
        return index

    def add_rect_xy(
        self, x0: float, x1: float, y0: float, y1: float, k: float, material_id: int
    ) -> int:
        """Add a rectangle spanning [x0, x1] x [y0, y1] at z = k."""
        return self.add_rect("xy", x0, x1, y0, y1, k, material_id)

    def add_rect_xz(
        self, x0: float, x1: float, z0: float, z1: float, k: float, material_id: int
    ) -> int:
        """Add a rectangle spanning [x0, x1] x [z0, z1] at y = k."""
        return self.add_rect("xz", x0, x1, z0, z1, k, material_id)

    def add_rect_yz(
        self, y0: float, y1: float, z0: float, z1: float, k: float, material_id: int
    ) -> int:
        """Add a rectangle spanning [y0, y1] x [z0, z1] at x = k."""
        return self.add_rect("yz", y0, y1, z0, z1, k, material_id)

    # =========================================================================
    # Scene Queries
    # =========================================================================

    def get_plane_count(self) -> int:
        """Get the number of planes in the scene."""
        return len(self.planes)

    def get_disk_count(self) -> int:
        """Get the number of disks in the scene."""
        return len(self.disks)

    def get_rect_count(self) -> int:
        """Get the number of rectangles in the scene."""
        return len(self.rects)

    def get_primitive_count(self) -> int:
        """Get the total number of primitives in the scene."""
        return get_primitive_count()

    def get_bounding_boxes(
        self,
        legacy_disk_boxes: bool = False,
    ) -> tuple[npt.NDArray[np.bool_], npt.NDArray[np.float32]]:
        """Bounding boxes of all primitives, indexed by primitive index.

        Args:
            legacy_disk_boxes: Report disks with the historical box.

        Returns:
            Tuple of (valid, boxes); see compute_bounding_boxes.
        """
        return compute_bounding_boxes(legacy_disk_boxes=legacy_disk_boxes)

    def scene_bounds(self) -> tuple[tuple[float, ...], tuple[float, ...]] | None:
        """Union of all finite primitive bounding boxes.

        Planes have no finite box and are skipped.

        Returns:
            Tuple of (minimum, maximum) corners, or None if no primitive has
            a finite box.
        """
        valid, boxes = self.get_bounding_boxes()
        finite = boxes[valid]
        if len(finite) == 0:
            return None
        minimum = finite[:, 0, :].min(axis=0)
        maximum = finite[:, 1, :].max(axis=0)
        return tuple(float(c) for c in minimum), tuple(float(c) for c in maximum)

    # =========================================================================
    # Scene Serialization
    # =========================================================================

    def to_config(self) -> SceneConfig:
        """Export the scene to a configuration object.

        Returns:
            A SceneConfig containing all materials and primitives.
        """
        config = SceneConfig()

        for mat in self.materials:
            config.materials.append({"name": mat.name, "params": dict(mat.params)})

        for plane in self.planes:
            config.planes.append(
                {
                    "center": list(plane.center),
                    "normal": list(plane.normal),
                    "material_id": plane.material_id,
                }
            )

        for disk in self.disks:
            config.disks.append(
                {
                    "center": list(disk.center),
                    "normal": list(disk.normal),
                    "radius": disk.radius,
                    "material_id": disk.material_id,
                }
            )

        for rect in self.rects:
            config.rects.append(
                {
                    "orientation": rect.orientation,
                    "a0": rect.a0,
                    "a1": rect.a1,
                    "b0": rect.b0,
                    "b1": rect.b1,
                    "k": rect.k,
                    "material_id": rect.material_id,
                }
            )

        return config

    def from_config(self, config: SceneConfig) -> None:
        """Load a scene from a configuration object.

        Clears the current scene and loads the configuration. Materials are
        loaded first so primitive handles resolve.

        Args:
            config: The scene configuration to load.

        Raises:
            ValueError: If the configuration contains invalid data.
        """
        self.clear()

        for mat_config in config.materials:
            name = str(mat_config.get("name", f"material_{len(self.materials)}"))
            self.add_material(name, mat_config.get("params", {}))

        for plane_config in config.planes:
            self.add_plane(
                center=plane_config.get("center", [0.0, 0.0, 0.0]),
                normal=plane_config.get("normal", [0.0, 1.0, 0.0]),
                material_id=plane_config.get("material_id", 0),
            )

        for disk_config in config.disks:
            self.add_disk(
                center=disk_config.get("center", [0.0, 0.0, 0.0]),
                normal=disk_config.get("normal", [0.0, 1.0, 0.0]),
                radius=disk_config.get("radius", 1.0),
                material_id=disk_config.get("material_id", 0),
            )

        for rect_config in config.rects:
            if "orientation" not in rect_config:
                raise ValueError("Rectangle configuration is missing 'orientation'")
            self.add_rect(
                orientation=rect_config["orientation"],
                a0=rect_config.get("a0", 0.0),
                a1=rect_config.get("a1", 1.0),
                b0=rect_config.get("b0", 0.0),
                b1=rect_config.get("b1", 1.0),
                k=rect_config.get("k", 0.0),
                material_id=rect_config.get("material_id", 0),
            )

        logger.debug(
            "Loaded scene: %d materials, %d primitives",
            len(self.materials),
            self.get_primitive_count(),
        )

    def to_dict(self) -> dict[str, Any]:
        """Export the scene to a dictionary (for JSON serialization)."""
        config = self.to_config()
        return {
            "materials": config.materials,
            "planes": config.planes,
            "disks": config.disks,
            "rects": config.rects,
        }

    def from_dict(self, data: dict[str, Any]) -> None:
        """Load a scene from a dictionary.

        Args:
            data: Dictionary with 'materials', 'planes', 'disks', 'rects' keys.
        """
        config = SceneConfig(
            materials=data.get("materials", []),
            planes=data.get("planes", []),
            disks=data.get("disks", []),
            rects=data.get("rects", []),
        )
        self.from_config(config)

    # =========================================================================
    # Capacity Information
    # =========================================================================

    @staticmethod
    def get_max_primitives() -> int:
        """Get the maximum number of primitives supported."""
        return MAX_PRIMITIVES

    @staticmethod
    def get_max_materials() -> int:
        """Get the maximum number of material handles supported."""
        return MAX_MATERIALS
