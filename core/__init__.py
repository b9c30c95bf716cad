"""
Core data structures and state management for Note Block Music.

Modules:
- models: Immutable data structures (Note, Layer, Project)
- state: Editing session state (active layer, selection, dirty flag)
- selection: Index-based note selection and rectangle select
- viewport: Screen to grid coordinate mapping
- commands: Command pattern for project edits
- editor: Session facade for UI input and per-frame updates
- persistence: Project file I/O (.nbm / .nbmp)
- config: Settings defaults and loading
- constants: Instrument catalog, note names, grid limits
"""
