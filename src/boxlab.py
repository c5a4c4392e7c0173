import logging
import os
import sys

import pygame

from labeller.collapse import IdCollapser
from labeller.images import LOADING, SUPPORTED_IMAGE_FORMATS, LoadedImage, load_image
from labeller.surface import AnnotationSurface
from labeller.window import ImageLabeller

LOGGER = logging.getLogger("BoxLab")

WINDOW_WIDTH = 1200
WINDOW_HEIGHT = 800
BG_COLOR = (30, 30, 30)
SIDEBAR_COLOR = (40, 40, 40)
TEXT_COLOR = (230, 230, 230)
MUTED_TEXT_COLOR = (150, 150, 150)
SELECTED_TEXT_COLOR = (255, 220, 80)
SIDEBAR_WIDTH = 300
TEXT_PADDING = 4
AREA_PADDING = 12

CONTROLS = (
    "Controls:\n"
    "O: Open image\n"
    "Drag on image: add box\n"
    "Drag box / corner: move / resize\n"
    "Hold Shift: square box\n"
    "Right click / Esc: deselect\n"
    "Delete: delete selected box\n"
    "F: Toggle sidebar\n"
    "Esc (nothing selected): Quit\n"
)


def configure_logging():
    level_name = os.getenv('BOXLAB_LOG_LEVEL', 'INFO').upper()
    level = getattr(logging, level_name, None)
    # BASIC_FORMAT is a module attribute too, but not a level
    if not isinstance(level, int):
        level = logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def startup_image_path(argv):
    if argv:
        return argv[0]
    return os.getenv('BOXLAB_IMAGE') or None


def open_image_dialog():
    import tkinter as tk
    from tkinter import filedialog
    # create a temporary hidden tkinter root to own the dialog
    root = tk.Tk()
    root.withdraw()
    path = filedialog.askopenfilename(
        title="Open image",
        filetypes=[("Image files", " ".join(SUPPORTED_IMAGE_FORMATS)), ("All files", "*")]
    )
    try:
        root.destroy()
    except tk.TclError:
        pass
    return path or None


def draw_text(surface, text, pos, font, color=TEXT_COLOR):
    lines = text.split('\n')
    x, y = pos
    for i, line in enumerate(lines):
        img = font.render(line, True, color)
        surface.blit(img, (x, y + i * (font.get_linesize())))


def labeller_area(win_w, win_h, sidebar_visible):
    left = SIDEBAR_WIDTH if sidebar_visible else 0
    return pygame.Rect(left + AREA_PADDING, AREA_PADDING,
                       max(0, win_w - left - 2 * AREA_PADDING),
                       max(0, win_h - 2 * AREA_PADDING))


def describe_rectangle(label, rect):
    return f"{label}  {int(rect.x)},{int(rect.y)}  {int(rect.width)}x{int(rect.height)}"


def main(argv=None):
    configure_logging()
    argv = sys.argv[1:] if argv is None else argv
    pygame.init()
    win_w, win_h = WINDOW_WIDTH, WINDOW_HEIGHT
    screen = pygame.display.set_mode((win_w, win_h), pygame.RESIZABLE)
    pygame.display.set_caption("BoxLab - bounding box labeller")
    clock = pygame.time.Clock()
    font = pygame.font.SysFont(None, 20)
    sidebar_font = pygame.font.SysFont(None, 24)

    # owner state: native-image rectangles and the selected id
    rectangles = {}
    selected_id = None
    collapse = IdCollapser(lambda: rectangles)

    def set_rectangles(new_rectangles):
        nonlocal rectangles
        rectangles = new_rectangles

    def select_rectangle(rect_id):
        nonlocal selected_id
        selected_id = rect_id

    labeller = ImageLabeller(AnnotationSurface(label_for=collapse, font=font), font=font)
    sidebar_visible = True
    labeller.resize(labeller_area(win_w, win_h, sidebar_visible))

    image = None
    pending_path = startup_image_path(argv)
    if pending_path:
        image = LoadedImage.loading(pending_path)

    running = True
    while running:
        # load after a frame so the placeholder is visible while loading
        if image is not None and image.status == LOADING and pending_path is None:
            image = load_image(image.path)
        pending_path = None

        # render before events so the surface holds the current projection
        labeller.render(image, rectangles, set_rectangles, select_rectangle, selected_id)

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
                continue
            if event.type == pygame.VIDEORESIZE:
                win_w, win_h = event.w, event.h
                LOGGER.debug("Window resized to %dx%d", win_w, win_h)
                screen = pygame.display.set_mode((win_w, win_h), pygame.RESIZABLE)
                labeller.resize(labeller_area(win_w, win_h, sidebar_visible))
                labeller.render(image, rectangles, set_rectangles, select_rectangle, selected_id)
                continue
            if labeller.handle_event(event):
                # re-project right away so the next event sees the owner's update
                labeller.render(image, rectangles, set_rectangles, select_rectangle, selected_id)
                continue
            if event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    running = False
                elif event.key == pygame.K_o:
                    path = open_image_dialog()
                    if path:
                        LOGGER.info("Opening %s", path)
                        image = LoadedImage.loading(path)
                        pending_path = path
                        rectangles = {}
                        selected_id = None
                elif event.key == pygame.K_f:
                    sidebar_visible = not sidebar_visible
                    LOGGER.debug("Sidebar %s", "shown" if sidebar_visible else "hidden")
                    labeller.resize(labeller_area(win_w, win_h, sidebar_visible))
                    labeller.render(image, rectangles, set_rectangles, select_rectangle, selected_id)

        screen.fill(BG_COLOR)
        labeller.draw(screen)

        if sidebar_visible:
            sidebar_rect = pygame.Rect(0, 0, SIDEBAR_WIDTH, win_h)
            pygame.draw.rect(screen, SIDEBAR_COLOR, sidebar_rect)
            base_y = 10
            draw_text(screen, CONTROLS, (10, base_y), sidebar_font)
            controls_height = (CONTROLS.count('\n') + 1) * sidebar_font.get_linesize()
            info_y = base_y + controls_height + TEXT_PADDING
            fit = labeller.fit
            if image is not None and image.dimensions is not None:
                native = image.dimensions
                draw_text(screen, f"Image: {native.width}x{native.height}", (10, info_y), sidebar_font)
            if fit is not None:
                draw_text(screen, f"Shown: {fit.displayed.width}x{fit.displayed.height}",
                          (10, info_y + 24), sidebar_font)
                draw_text(screen, f"Scale: {fit.scale:.3f}", (10, info_y + 48), sidebar_font)
            list_y = info_y + 84
            draw_text(screen, f"Boxes ({len(rectangles)}):", (10, list_y), sidebar_font)
            row_y = list_y + 26
            for rect_id, rect in rectangles.items():
                if row_y > win_h - 20:
                    draw_text(screen, "...", (10, row_y), font, color=MUTED_TEXT_COLOR)
                    break
                color = SELECTED_TEXT_COLOR if rect_id == selected_id else TEXT_COLOR
                draw_text(screen, describe_rectangle(collapse(rect_id), rect), (10, row_y), font, color=color)
                row_y += font.get_linesize() + 2

        pygame.display.flip()
        clock.tick(60)

    pygame.quit()


if __name__ == '__main__':
    try:
        main()
    except Exception:
        import traceback
        traceback.print_exc()
        # pause so user/runner can see the traceback
        try:
            input("Error occurred. Press Enter to exit...")
        except EOFError:
            pass
