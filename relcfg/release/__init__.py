"""Release configuration domain: build, load, detect, render, validate and patch."""
