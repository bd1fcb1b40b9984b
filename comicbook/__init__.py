"""Comic Book Generator: story text in, illustrated comic PDF out."""
