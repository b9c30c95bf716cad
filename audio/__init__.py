"""
Audio layer for Note Block Music.

Modules:
- scheduler: Transport and tick-based note firing
- trigger: Audio collaborator interface and test doubles
- dsp: Sample loading, pitch shifting and voice mixing
- sampler: Real-time sample player (sounddevice)
"""
