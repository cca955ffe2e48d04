"""
Isometric Sorting Example Scene

A small pygame scene that registers a handful of boxes with an
IsometricWorld, sorts them every frame and draws them in the assigned
order. Move the highlighted box with the arrow keys and watch it slide
behind and in front of its neighbours.

Controls:
- Arrow keys: move the selected box
- TAB: select the next box
- S: toggle sequential / parallel strategy
- ESC: quit
"""

import logging
import os
import sys

import pygame

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from isosort import IsometricObject, IsometricWorld, SortConfig, SorterType

WINDOW_WIDTH = 900
WINDOW_HEIGHT = 640
PIXELS_PER_UNIT = 96
MOVE_STEP = 0.05

BACKGROUND_COLOR = (24, 26, 32)
SELECTED_COLOR = (250, 210, 90)
BOX_COLORS = [
    (96, 160, 220),
    (120, 200, 140),
    (220, 120, 110),
    (180, 140, 220),
    (230, 170, 90),
]


def toScreen(point, originX: int, originY: int):
    """World space is y-up, the screen is y-down."""
    return (originX + point[0] * PIXELS_PER_UNIT, originY - point[1] * PIXELS_PER_UNIT)


def shade(color, factor: float):
    return tuple(max(0, min(255, int(c * factor))) for c in color)


def drawBox(surface: pygame.Surface, obj: IsometricObject, color, originX: int, originY: int) -> None:
    """Draw the outline of an object as a shaded isometric box."""
    top, rightTop, rightBottom, bottom, leftBottom, leftTop = [
        toScreen(c, originX, originY) for c in obj.corners
    ]
    lift = obj.corners[1].y - obj.corners[2].y
    bottomTop = toScreen((obj.floor_bottom.x, obj.floor_bottom.y + lift), originX, originY)

    # Roof diamond
    pygame.draw.polygon(surface, color, [top, rightTop, bottomTop, leftTop])
    # Left face
    pygame.draw.polygon(surface, shade(color, 0.7), [leftTop, bottomTop, bottom, leftBottom])
    # Right face
    pygame.draw.polygon(surface, shade(color, 0.5), [bottomTop, rightTop, rightBottom, bottom])
    pygame.draw.lines(surface, shade(color, 1.2), True,
                      [top, rightTop, rightBottom, bottom, leftBottom, leftTop], 1)


def buildScene(world: IsometricWorld):
    layout = [
        ((0.0, 0.0), (2, 2), 0.3),
        ((1.0, 0.5), (1, 1), 0.8),
        ((-1.0, 0.5), (1, 3), 0.4),
        ((0.0, 1.2), (1, 1), 1.2),
        ((1.5, -0.6), (2, 1), 0.5),
    ]
    boxes = []
    for i, (position, extents, height) in enumerate(layout):
        box = IsometricObject(position, extents, height, name=f"box{i}")
        world.register(box)
        boxes.append(box)
    return boxes


def main():
    """Main entry point for the example"""
    logging.basicConfig(
        level=logging.DEBUG if "--debug" in sys.argv else logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )
    log = logging.getLogger("exampleScene")

    pygame.init()
    screen = pygame.display.set_mode((WINDOW_WIDTH, WINDOW_HEIGHT))
    pygame.display.set_caption("isosort example scene")
    clock = pygame.time.Clock()
    font = pygame.font.SysFont(None, 22)

    world = IsometricWorld(SortConfig(sorter_type=SorterType.PARALLEL))
    boxes = buildScene(world)
    selected = 0
    originX, originY = WINDOW_WIDTH // 2, WINDOW_HEIGHT // 2 + 100

    running = True
    while running:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    running = False
                elif event.key == pygame.K_TAB:
                    selected = (selected + 1) % len(boxes)
                elif event.key == pygame.K_s:
                    nextType = (SorterType.SEQUENTIAL if world.sorter_type == SorterType.PARALLEL
                                else SorterType.PARALLEL)
                    world.set_sorter_type(nextType)
                    log.info("Switched to %s strategy", nextType.value)

        keys = pygame.key.get_pressed()
        x, y = boxes[selected].position
        if keys[pygame.K_LEFT]:
            x -= MOVE_STEP
        if keys[pygame.K_RIGHT]:
            x += MOVE_STEP
        if keys[pygame.K_UP]:
            y += MOVE_STEP
        if keys[pygame.K_DOWN]:
            y -= MOVE_STEP
        boxes[selected].move_to(x, y)

        drawOrder = world.sort()

        screen.fill(BACKGROUND_COLOR)
        for obj in drawOrder:
            index = boxes.index(obj)
            color = SELECTED_COLOR if index == selected else BOX_COLORS[index % len(BOX_COLORS)]
            drawBox(screen, obj, color, originX, originY)
            label = font.render(str(obj.order), True, (255, 255, 255))
            screen.blit(label, toScreen(obj.floor_center, originX, originY))

        stats = world.stats
        info = font.render(
            f"{world.sorter_type.value}  edges: {stats['edge_count']}  "
            f"roots: {stats['root_count']}  {stats['average_ms']:.2f} ms",
            True, (200, 200, 200)
        )
        screen.blit(info, (10, 10))

        pygame.display.flip()
        clock.tick(60)

    pygame.quit()


if __name__ == "__main__":
    main()
