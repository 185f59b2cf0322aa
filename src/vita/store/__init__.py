"""Document store: one JSON document holds all tracked state.

Layout of the persisted document:
    {
      "version":     "1.4",            # migration watermark
      "settings":    {...},            # habits, substances, categories, pin_hash
      "days":        {"2024-01-01": {...}, ...},   # one Day Record per touched date
      "issues":      {id: {...}},
      "medications": {id: {...}},
      "books":       {id: {...}},
      ...                              # unknown keys are kept verbatim
    }

Load path:   binding.resolve() → binding.read() → migrations.migrate()
Save path:   SaveCoordinator → DocumentStore.persist() → binding.write()
"""
