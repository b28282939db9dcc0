"""gitops - sequence repository operations through a version-control engine."""
