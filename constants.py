LOGGER_NAME = "Scene_Timeline"
MIN_SCENE_LENGTH = 5
DEFAULT_SCENE_LENGTH = 30
DEFAULT_FPS = 30
SCENE_PALETTE = (
    "#F65937",
    "#379EF6",
    "#1FBD5F",
    "#F6A337",
    "#9B37F6",
    "#F6379B",
    "#37F6A3",
    "#F6E337",
    "#37A3F6",
    "#F63737",
)
DEFAULT_SCENES = (
    {"name": "Scene 1", "color": "#F65937", "length": 30},
    {"name": "Scene 2", "color": "#379EF6", "length": 60},
    {"name": "Scene 3", "color": "#1FBD5F", "length": 30},
)
CONFIG_FILE_NAME = "scene_timeline.json"
