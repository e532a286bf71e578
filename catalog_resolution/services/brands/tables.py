"""Built-in brand alias and sub-brand parent tables.

Every entry is curated by hand. A missing parent entry only costs a
missed merge; a wrong one silently disables the brand-mismatch guard,
so add parents only for documented corporate relationships.
"""

# alias -> canonical brand (both lowercase)
DEFAULT_ALIASES = {
    "ziigat": "ziigaat",
    "audio technica": "audio-technica",
    "dca": "dan clark audio",
    "mrspeakers": "dan clark audio",
    "mr speakers": "dan clark audio",
    "dan clark": "dan clark audio",
    "knowledge zenith": "kz",
    "shuoer": "letshuoer",
    "thie audio": "thieaudio",
    "raal requisite": "raal",
    "raal-requisite": "raal",
    "64audio": "64 audio",
    "jade audio": "jadeaudio",
    "tinhifi": "tin hifi",
    "tin hifi audio": "tin hifi",
    "seven hertz": "7hz",
    "dd hifi": "ddhifi",
    "hifi man": "hifiman",
    "beyer dynamic": "beyerdynamic",
    "campfire": "campfire audio",
}

# sub-brand -> parent brand (canonical forms)
DEFAULT_PARENTS = {
    "jadeaudio": "fiio",
    "snowsky": "fiio",
    "celest": "kinera",
    "kiwi ears": "linsoul",
    "thieaudio": "linsoul",
    "sendy audio": "sivga",
    "rinaro": "meze",
}
