ENVIRONMENT_DIR: str = "textures/environment"
ENVIRONMENT_FACES: tuple[str, ...] = ("px", "nx", "py", "ny", "pz", "nz")
ENVIRONMENT_EXT: str = ".jpg"

# Planet surfaces
MERCURY_TEXTURE_PATH: str = "textures/mercury.jpg"
VENUS_TEXTURE_PATH: str = "textures/venus.jpg"
EARTH_TEXTURE_PATH: str = "textures/earth.jpg"
MARS_TEXTURE_PATH: str = "textures/mars.jpg"
