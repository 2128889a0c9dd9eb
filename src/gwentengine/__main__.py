from gwentengine.cli import main

raise SystemExit(main())
