"""Cornell box scene built from axis-aligned rectangles.

The classic Cornell box is the canonical scene for axis-aligned rectangles:
every wall and the ceiling light is a RectXY, RectXZ or RectYZ.

The box consists of:
- Left wall (x = box_size): green, RectYZ
- Right wall (x = 0): red, RectYZ
- Floor (y = 0) and ceiling (y = box_size): white, RectXZ
- Back wall (z = box_size): white, RectXY
- Ceiling light (y = box_size - 1): RectXZ, 130 x 105 in the classic 555 box

Materials are registered as opaque handles whose params carry the colors;
shading them is up to the renderer.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from flat_primitives.scene.cornell_box import create_cornell_box_scene
    >>> scene, light_mat_id = create_cornell_box_scene()
    >>> scene.get_rect_count()
    6
"""

from dataclasses import dataclass

from flat_primitives.scene.manager import SceneManager

# =============================================================================
# Cornell Box Parameters
# =============================================================================


@dataclass
class CornellBoxParams:
    """Parameters for configuring a Cornell box scene.

    Attributes:
        light_emission: RGB radiance of the ceiling light.
        left_wall_color: RGB albedo of the wall at x = box_size.
        right_wall_color: RGB albedo of the wall at x = 0.
        white_color: RGB albedo of the floor, ceiling and back wall.
    """

    light_emission: tuple[float, float, float] = (15.0, 15.0, 15.0)
    left_wall_color: tuple[float, float, float] = (0.12, 0.45, 0.15)
    right_wall_color: tuple[float, float, float] = (0.65, 0.05, 0.05)
    white_color: tuple[float, float, float] = (0.73, 0.73, 0.73)


# =============================================================================
# Cornell Box Constants
# =============================================================================

# Classic Cornell box dimensions (555x555x555 units)
BOX_SIZE = 555.0

# Ceiling light extents in the classic 555 box
LIGHT_X0, LIGHT_X1 = 213.0, 343.0
LIGHT_Z0, LIGHT_Z1 = 227.0, 332.0

# Gap between the light and the ceiling
LIGHT_CEILING_GAP = 1.0


def get_light_rect_info(box_size: float = BOX_SIZE) -> dict[str, float]:
    """Get the ceiling light rectangle, scaled to the box size.

    Args:
        box_size: The size of the box. Default is 555.0.

    Returns:
        A dictionary with keys 'x0', 'x1', 'z0', 'z1' (extents), 'k' (height
        of the light plane) and 'area'.
    """
    scale = box_size / BOX_SIZE
    x0, x1 = LIGHT_X0 * scale, LIGHT_X1 * scale
    z0, z1 = LIGHT_Z0 * scale, LIGHT_Z1 * scale
    return {
        "x0": x0,
        "x1": x1,
        "z0": z0,
        "z1": z1,
        "k": box_size - LIGHT_CEILING_GAP * scale,
        "area": (x1 - x0) * (z1 - z0),
    }


def create_cornell_box_scene(
    box_size: float = BOX_SIZE,
    params: CornellBoxParams | None = None,
) -> tuple[SceneManager, int]:
    """Create a Cornell box scene with standard configuration.

    The coordinate system places the box between (0, 0, 0) and
    (box_size, box_size, box_size), open toward -Z.

    Args:
        box_size: The size of the box in each dimension.
        params: Optional CornellBoxParams for colors and light emission.

    Returns:
        A tuple of (SceneManager, light_material_id).
    """
    if params is None:
        params = CornellBoxParams()

    scene = SceneManager()

    red = scene.add_material("red", {"albedo": params.right_wall_color})
    white = scene.add_material("white", {"albedo": params.white_color})
    green = scene.add_material("green", {"albedo": params.left_wall_color})
    light = scene.add_material("light", {"emission": params.light_emission})

    scene.add_rect_yz(0.0, box_size, 0.0, box_size, box_size, green)
    scene.add_rect_yz(0.0, box_size, 0.0, box_size, 0.0, red)

    lr = get_light_rect_info(box_size)
    scene.add_rect_xz(lr["x0"], lr["x1"], lr["z0"], lr["z1"], lr["k"], light)

    scene.add_rect_xz(0.0, box_size, 0.0, box_size, 0.0, white)
    scene.add_rect_xz(0.0, box_size, 0.0, box_size, box_size, white)
    scene.add_rect_xy(0.0, box_size, 0.0, box_size, box_size, white)

    return scene, light


def get_cornell_box_bounds(box_size: float = BOX_SIZE) -> dict[str, tuple[float, float, float]]:
    """Get the nominal bounds of the Cornell box scene.

    Args:
        box_size: The size of the box. Default is 555.0.

    Returns:
        A dictionary with keys 'min', 'max', 'center' and 'size'.
    """
    return {
        "min": (0.0, 0.0, 0.0),
        "max": (box_size, box_size, box_size),
        "center": (box_size / 2.0, box_size / 2.0, box_size / 2.0),
        "size": (box_size, box_size, box_size),
    }
