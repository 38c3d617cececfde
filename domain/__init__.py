"""Recipes and themed menus from a generative model.

Each use case is a `Pipeline` of `Step`s. A step makes one call to the model
and checks the answer against an `ExpectedShape`; a pipeline feeds later
steps from earlier outputs and stops at the first failure.

Everything that talks to the outside world (the model, the filesystem, HTTP)
sits at the edge and can be faked in tests.
"""
