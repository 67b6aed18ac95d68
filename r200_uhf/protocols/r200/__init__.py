"""R200 module protocol: constants, commands and decoded records."""
