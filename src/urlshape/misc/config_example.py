'''
urlshape config. See 'urlshape config check' to validate it.
'''

# Nodes of the path tree with more children than this get generalized.
# Can also be [threshold, frequency cutoff]: only paths seen at most 'cutoff' times are generalized,
# or a function of the raw patterns of a bucket returning either form.
THRESHOLD = [30, 1]

# Path segments matching any of these are always treated as parameters.
# Presets: 'numeric', 'percent-encoded', 'uuid', 'hex-id'; anything else is a regex (or pass a function).
DYNAMIC_FEATURES = [
    'numeric',
    'percent-encoded',
]

# Urls matching any of these regexes are ignored.
FILTERS = [
    r'\.(css|js|png|jpg|svg|ico|woff2?)$',
]

# Where the inferred patterns are kept between runs (defaults to the user data dir).
# STATE = '/path/to/urlshape.json'

# How many sample paths to print for each dynamic pattern.
MAX_SAMPLES = 3
