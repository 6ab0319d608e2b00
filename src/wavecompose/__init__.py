"""wavecompose — audio waveform visualizers over a still image.

Position two waveform regions (slots A and B) over a background image,
compile the layout into an ffmpeg filter graph, and render an mp4 with
one or two audio tracks. Layouts can be edited interactively through the
geometry engine or declared in a YAML manifest.
"""
