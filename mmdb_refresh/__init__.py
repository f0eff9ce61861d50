"""mmdb-refresh - keeps a local MaxMind database current from a remote endpoint or a staging directory."""
