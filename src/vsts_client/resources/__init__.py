# ABOUTME: Resources package initialization for the VSTS REST client
# ABOUTME: Per-resource wrappers built on VstsClient.invoke

"""
VSTS resource operations

Each module holds plain functions taking an open VstsClient first:

    - projects.py: list, get, create and delete team projects
    - work_items.py: work items, work item types and saved queries
    - git.py: Git repositories and refs
    - builds.py: build definitions, builds and artifact downloads
    - policies.py: branch policy configurations
"""
