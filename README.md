# amphora

A small 2D game engine on top of pygame. It gives a game:

- **Scenes** with `init`, `update` and `destroy` hooks, switched by name
  through a `SceneManager` (`amphora.scenes`).
- **Sprites** with named, frame-based animation sets, one-shot animations,
  flipping, hiding and draw ordering, loaded through an `ImageLibrary`
  (`amphora.sprite`).
- **Text strings** drawn with named fonts, which can show only the start of
  their text for a typewriter effect (`amphora.text`).
- **Tilemaps** read from Tiled JSON maps in orthogonal or isometric layout,
  with fading layers and object groups (`amphora.tilemap`), and rectangle
  collision tests against those groups (`amphora.collision`).
- **A camera** that can follow a sprite, be bounded to an area and zoom in
  steps (`amphora.render`).
- **Input mapping** from keys and gamepad buttons to named actions, with the
  bindings kept in the game database (`amphora.input`).
- **Sound effects and one music track** with fades (`amphora.mixer`).
- **Persistent data**: window preferences and save data in a SQLite
  database (`amphora.storage`).
- **Session data**: a per-run store of integers by short string keys
  (`amphora.session`, backed by `amphora.hashtable.HashTable`).
- **A xorshift random number generator** (`amphora.rng.XorShift32`).

## Installation

```
pip install .
```

To run the test suite:

```
pip install .[test]
pytest
```

## Writing a game

A game is a set of scenes. Subclass `Scene` and override its hooks, or pass
plain functions as `Scene(init_func=..., update_func=..., destroy_func=...)`:

```python
from amphora.engine import Engine
from amphora.scenes import Scene


class Title(Scene):
    def init(self):
        self.frames = 0

    def update(self, frame_count, state):
        self.frames = frame_count
        if state.pressed("attack"):
            self.engine.load_scene("level")


class Level(Scene):
    def init(self):
        e = self.engine
        e.images.sources["player"] = "player.png"
        self.player = e.images.create_sprite(e.renderer, "player", x=100, y=100)
        self.player.add_frameset("idle", 0, 0, 32, 32, num_frames=4, delay=150)
        e.renderer.set_camera_target(self.player)


engine = Engine({"title": Title(), "level": Level()}, data_dir="save")
engine.run()
```

The first scene given is the one that starts, and its `init` runs while the
`Engine` is being built. The engine sets `scene.engine` on every scene, so a
scene reaches the subsystems through it: `renderer`, `images`, `fonts`,
`maps`, `mixer` (None when audio could not be opened), `inputs`,
`save_data`, `session`, `prefs` and `rng`.

`Engine.run` runs frames at the stored frame rate (60 by default) until the
window is closed or `engine.quit()` is called, then calls `shutdown`, which
stores the window size, window flags and frame rate and releases every
subsystem. `Engine.step(events)` runs a single frame from a list of pygame
events, and the engine can be used as a context manager.

Switching scenes with `load_scene` destroys the current scene, clears the
render list, the current map and its object groups and the camera boundary,
and then initialises the new scene.

## Resources

Images, fonts, maps, sound effects and music are looked up by name. The
default tables are `IMAGES`, `FONTS`, `MAPS`, `SFX` and `MUSIC` in
`amphora.config`; each library copies its table into its `sources` dict,
which a game can extend. A source may be a path, raw bytes or an open
binary file; a map may also be an already parsed dict. A font source of
`None` uses pygame's built-in font:

```python
e.fonts.sources["default"] = None
score = e.fonts.create_string(e.renderer, "default", 24, 10, 10, 1000,
                              color("white"), True, "Score: 0")
score.update_text("Score: 10")
```

Maps name their tileset image in the first tileset's `name`, which is looked
up in the image library. After `e.maps.set_map("level1", 2.0)`, an object
group can be used for collision:

```python
from amphora.collision import Collision, check_object_group_collision

side = check_object_group_collision(player, e.maps.rects_by_group("walls"))
if side is Collision.BOTTOM:
    ...
```

## Input

The default actions are `left`, `right`, `up`, `down`, `attack` and `menu`,
bound to W, A, S, D, Space and Left Shift on the keyboard and to the d-pad,
A and B on a gamepad. Scenes receive an `InputState`; `state.pressed("left")`
and `state.left` both report whether an action is held.

`InputManager.update_keymap(action, keycode)` stores a new key for an action
in the database; it takes effect the next time `load_keymap` runs.
`action_key_name(action)` returns the stored key name. For the mouse,
`object_hovered` and `object_clicked` in `amphora.input` test a sprite or
string against a mouse position and button mask given by the caller.

## Saving progress

```python
from amphora.storage import GameDatabase, SaveData

with GameDatabase("game.db") as db:
    save = SaveData(db)
    save.save_number("level", 3)
    save.save_string("player", "Ada")
    level = save.load_number("level", 1)
    name = save.load_string("player")
```

`load_number` returns its default when nothing is stored under the
attribute; `load_string` raises `KeyError`. Without a path, `GameDatabase`
uses `amphora.db` in the per-user data directory.

## Command line

Installing the package provides the `amphora` command:

```
amphora [--data-dir DIR] [--frames N]
```

`--data-dir` chooses where the database and installation identifier are
kept, and `--frames` stops after that many frames.

## What it does not do

The package ships no game content: the `amphora` command starts an engine
with no scenes, so it opens an empty window until it is closed. A game
supplies its own scenes and resource files. Analogue stick motion is
accepted but not mapped to any action, and only the first tileset of a map
is used.