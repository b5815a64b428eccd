"""A small 2D game engine on pygame: scenes, sprites, tilemaps, text, sound, input and save data."""

__version__ = "0.1.0"

__all__ = [
    "collision",
    "config",
    "engine",
    "errors",
    "events",
    "geometry",
    "hashtable",
    "input",
    "mixer",
    "render",
    "rng",
    "scenes",
    "session",
    "sprite",
    "storage",
    "text",
    "tilemap",
]