"""Dropdown menu state with outside-click closing.

Menus are identified by region ids ("selection", "row:Size:S|Color:Red").
A click is reported as the set of region ids it landed in; every open menu
whose region is not in that set closes.
"""

SELECTION_MENU = "selection"


def row_menu(signature):
    return f"row:{signature}"


class MenuRegistry:
    def __init__(self):
        self.regions = set()
        self.open_regions = set()

    def register(self, region_id):
        self.regions.add(region_id)

    def unregister(self, region_id):
        self.regions.discard(region_id)
        self.open_regions.discard(region_id)

    def is_open(self, region_id):
        return region_id in self.open_regions

    def open(self, region_id):
        if region_id not in self.regions:
            return False
        self.open_regions.add(region_id)
        return True

    def close(self, region_id):
        self.open_regions.discard(region_id)

    def toggle(self, region_id):
        if self.is_open(region_id):
            self.close(region_id)
            return False
        return self.open(region_id)

    def click(self, hit_regions=()):
        """Close open menus the click landed outside of. Returns those closed."""
        hit = set(hit_regions)
        closed = {r for r in self.open_regions if r not in hit}
        self.open_regions -= closed
        return closed

    def sync(self, region_ids, keep=()):
        """Replace the dynamic regions, keeping the fixed ones in ``keep``."""
        self.regions = set(region_ids) | set(keep)
        self.open_regions &= self.regions
