"""spotmix - random artist playlists for Spotify."""

__version__ = "0.1.0"
