"""lambda-archiver: packages a built application into a deployable app.zip."""

__version__ = "0.1"
