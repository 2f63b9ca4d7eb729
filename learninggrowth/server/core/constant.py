from learninggrowth import __version__

PROJECT_NAME = "LearningGrowth API"
VERSION = __version__
API_PREFIX = "/api"
