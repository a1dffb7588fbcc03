"""HTTP API for the Consistent Storybook Generator."""
