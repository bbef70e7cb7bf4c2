"""schema-composer - compose schemas discovered from JSON document collections"""

# Package version - updated by release automation
__version__ = "0.1.0"
