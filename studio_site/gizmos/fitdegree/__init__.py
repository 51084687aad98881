"""FitDegree gizmo pack."""
